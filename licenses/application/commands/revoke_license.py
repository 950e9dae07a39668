"""
RevokeLicenseCommand.

Command to revoke a license; revoked licenses fail every check.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class RevokeLicenseCommand:
    """Command to revoke a license."""

    key: str
    actor_ip: Optional[str] = None
