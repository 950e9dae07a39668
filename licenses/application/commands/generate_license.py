"""
GenerateLicenseCommand.

Command to generate a new license key for a product.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from core.domain.value_objects import LicenseType


@dataclass
class GenerateLicenseCommand:
    """
    Command to generate a license key.

    Empty key-format fields and a None auto_allowed_ip are inherited
    from the product, then its group, then the configured defaults.
    """

    product_id: uuid.UUID
    type: Optional[LicenseType] = None
    expires_at: Optional[datetime] = None
    duration: Optional[str] = None  # e.g. "30d", "6mo"
    prefix: str = ""
    separator: str = ""
    charset: str = ""
    length: int = 0
    feature_codes: List[str] = field(default_factory=list)
    release_versions: List[str] = field(default_factory=list)
    allowed_ips: List[str] = field(default_factory=list)
    allowed_networks: List[str] = field(default_factory=list)
    owner_id: Optional[str] = None
    auto_allowed_ip: Optional[bool] = None
    auto_allowed_ip_limit: Optional[int] = None
    actor_ip: Optional[str] = None
