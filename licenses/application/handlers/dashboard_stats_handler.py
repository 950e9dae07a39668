"""
Dashboard statistics handler.
"""
import logging
from datetime import datetime, timezone

from core.domain.exceptions import InvalidDurationError
from licenses.application.dto.license_dto import DashboardStatsDTO
from licenses.application.handlers.list_logs_handler import with_log_deadline
from licenses.application.queries.dashboard_stats import DashboardStatsQuery
from licenses.domain.duration import apply_duration
from licenses.ports.stats import StatsReader

logger = logging.getLogger(__name__)


class DashboardStatsHandler:
    """Handler for DashboardStatsQuery."""

    def __init__(self, stats_reader: StatsReader):
        self.stats_reader = stats_reader

    async def handle(self, query: DashboardStatsQuery) -> DashboardStatsDTO:
        """
        Compute dashboard totals.

        The look-back window is the duration string read backwards from now,
        so "1mo" covers the same span as a one-month license.

        Raises:
            InvalidDurationError: If the duration is malformed
            LogQueryTimeoutError: If the counts take too long
        """
        now = datetime.now(timezone.utc)
        try:
            since = now - (apply_duration(now, query.duration) - now)
        except OverflowError as exc:
            raise InvalidDurationError(f"Duration out of range: {query.duration!r}") from exc

        stats = await with_log_deadline(
            self.stats_reader.dashboard_stats(owner_id=query.owner_id, since=since, now=now)
        )
        logger.debug("Dashboard stats for owner=%s since %s", query.owner_id, since.isoformat())
        return DashboardStatsDTO(**stats)
