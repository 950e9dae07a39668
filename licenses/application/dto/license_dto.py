"""
License DTOs for API responses.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from licenses.domain.license import License


@dataclass
class LicenseDTO:
    """DTO for license information."""

    id: uuid.UUID
    key: str
    product_id: uuid.UUID
    type: str
    status: str
    owner_id: Optional[str]
    allowed_ips: List[str]
    allowed_networks: List[str]
    auto_allowed_ip: bool
    auto_allowed_ip_limit: int
    expires_at: Optional[datetime]
    features: List[str]
    releases: List[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_entity(cls, license: License) -> "LicenseDTO":
        """Build the DTO from a License entity."""
        return cls(
            id=license.id,
            key=license.key,
            product_id=license.product_id,
            type=license.type.value,
            status=license.status.value,
            owner_id=license.owner_id,
            allowed_ips=list(license.allowed_ips),
            allowed_networks=list(license.allowed_networks),
            auto_allowed_ip=license.auto_allowed_ip,
            auto_allowed_ip_limit=license.auto_allowed_ip_limit,
            expires_at=license.expires_at,
            features=list(license.features),
            releases=list(license.releases),
            created_at=license.created_at,
            updated_at=license.updated_at,
        )


@dataclass
class LicenseListDTO:
    """DTO for a page of licenses."""

    items: List[LicenseDTO]
    total: int
    page: int
    limit: int


@dataclass
class CheckLicenseResultDTO:
    """DTO for a license check response."""

    valid: bool
    expires_at: Optional[datetime]
    reason: Optional[str] = None
    token: Optional[str] = None


@dataclass
class LogPageDTO:
    """DTO for a page of audit log records."""

    items: List[Dict[str, Any]] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10


@dataclass
class DashboardStatsDTO:
    """DTO for admin dashboard totals."""

    total_products: int = 0
    total_products_change: int = 0
    total_licenses: int = 0
    total_licenses_change: int = 0
    total_license_checks: int = 0
    total_license_checks_change: int = 0
    total_license_check_errors: int = 0
    total_license_check_errors_change: int = 0
    total_admin_actions: int = 0
    recent_admin_logs: List[Dict[str, Any]] = field(default_factory=list)
