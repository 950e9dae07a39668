"""
CheckLicenseQuery.

Query issued by client software to ask whether a key is usable
from the calling IP, optionally for a version and a feature.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class CheckLicenseQuery:
    """Query to validate a license key."""

    license_key: Optional[str]
    client_ip: Optional[str]
    user_agent: str = ""
    version: Optional[str] = None
    feature: Optional[str] = None
