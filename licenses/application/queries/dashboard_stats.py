"""
Dashboard statistics query.
"""

from dataclasses import dataclass
from typing import Optional

DEFAULT_STATS_WINDOW = "30d"


@dataclass
class DashboardStatsQuery:
    """Query for usage totals, optionally for one owner, over a look-back window."""

    owner_id: Optional[str] = None
    duration: str = DEFAULT_STATS_WINDOW
