"""
Dashboard statistics port (interface).
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Optional


class StatsReader(ABC):
    """Abstract source of usage totals for the admin dashboard."""

    @abstractmethod
    async def dashboard_stats(
        self, owner_id: Optional[str], since: datetime, now: datetime
    ) -> Dict[str, Any]:
        """
        Count products, licenses, checks and admin actions.

        Check, error and admin action totals cover [since, now]; product and
        license totals are all-time. Change figures compare fixed windows
        ending at now: 30 days for products and licenses, the last 24 hours
        against the 24 hours before for checks and errors.

        Args:
            owner_id: Restrict every figure to this owner when given
            since: Start of the look-back window
            now: Reference time for the change windows

        Returns:
            Dict with the DashboardStatsDTO fields
        """
        pass
