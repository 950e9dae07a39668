"""
UpdateLicenseCommand.

Command to change an existing license. Fields left as None are unchanged.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from core.domain.value_objects import LicenseStatus, LicenseType


@dataclass
class UpdateLicenseCommand:
    """Command to partially update a license."""

    key: str
    type: Optional[LicenseType] = None
    expires_at: Optional[datetime] = None
    duration: Optional[str] = None
    allowed_ips: Optional[List[str]] = None
    allowed_networks: Optional[List[str]] = None
    feature_codes: Optional[List[str]] = None
    release_versions: Optional[List[str]] = None
    status: Optional[LicenseStatus] = None
    owner_id: Optional[str] = None
    auto_allowed_ip: Optional[bool] = None
    auto_allowed_ip_limit: Optional[int] = None
    actor_ip: Optional[str] = None
