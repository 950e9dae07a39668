"""
PurgeLicenseCommand.

Command to permanently delete a license.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class PurgeLicenseCommand:
    """Command to delete a license."""

    key: str
    actor_ip: Optional[str] = None
