"""
License domain entity.

This is the core domain entity representing a license key and the
restrictions attached to it.
It contains business logic and is independent of infrastructure.
"""
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import List, Optional

from core.domain.value_objects import LicenseStatus, LicenseType


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    The key is assigned at creation and never changes. allowed_ips only
    grows through auto-allow admission; administrators may replace it
    wholesale through an update.
    """

    id: uuid.UUID
    key: str
    product_id: uuid.UUID
    type: LicenseType
    status: LicenseStatus
    owner_id: Optional[str] = None
    allowed_ips: List[str] = field(default_factory=list)
    allowed_networks: List[str] = field(default_factory=list)
    auto_allowed_ip: bool = False
    auto_allowed_ip_limit: int = 0
    expires_at: Optional[datetime] = None
    features: List[str] = field(default_factory=list)
    releases: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate license entity."""
        if not self.key or len(self.key.strip()) == 0:
            raise ValueError("License key cannot be empty")
        if len(self.key) > 255:
            raise ValueError("License key too long")
        if not self.product_id:
            raise ValueError("Product ID is required")
        if self.auto_allowed_ip_limit < 0:
            raise ValueError("Auto-allowed IP limit cannot be negative")

    @classmethod
    def create(
        cls,
        key: str,
        product_id: uuid.UUID,
        license_type: LicenseType = LicenseType.PERPETUAL,
        license_id: Optional[uuid.UUID] = None,
        **restrictions,
    ) -> "License":
        """
        Create a new active License entity.

        Args:
            key: Generated license key
            product_id: Product UUID
            license_type: License type
            license_id: Optional UUID (generated if not provided)
            **restrictions: owner_id, allow-lists, auto-allow policy,
                expires_at, features and releases

        Returns:
            License entity instance
        """
        now = datetime.now(timezone.utc)
        return cls(
            id=license_id or uuid.uuid4(),
            key=key,
            product_id=product_id,
            type=license_type,
            status=LicenseStatus.ACTIVE,
            created_at=now,
            updated_at=now,
            **restrictions,
        )

    @property
    def is_revoked(self) -> bool:
        return self.status == LicenseStatus.REVOKED

    def is_expired(self, current_time: Optional[datetime] = None) -> bool:
        """
        Check if the license has passed its expiry.

        Args:
            current_time: Current time (defaults to now)

        Returns:
            True if an expiry is set and lies in the past
        """
        if self.expires_at is None:
            return False
        return self.expires_at < (current_time or datetime.now(timezone.utc))

    @property
    def restricts_ip(self) -> bool:
        """True when the IP step of validation applies to this license."""
        return bool(self.allowed_ips or self.allowed_networks or self.auto_allowed_ip)

    def with_changes(self, **changes) -> "License":
        """
        Create a new License instance with the given fields replaced.

        The key and id cannot be changed.
        """
        if "key" in changes or "id" in changes:
            raise ValueError("License key and id are immutable")
        return replace(self, updated_at=datetime.now(timezone.utc), **changes)

    def revoke(self) -> "License":
        """
        Create a new License instance with revoked status.

        Returns:
            New License instance with revoked status
        """
        return self.with_changes(status=LicenseStatus.REVOKED)

    def mark_expired(self) -> "License":
        """Create a new License instance with expired status."""
        return self.with_changes(status=LicenseStatus.EXPIRED)
