"""
Unit tests for the log listing and dashboard statistics handlers.
"""
import asyncio
import uuid
from datetime import timedelta

import pytest

from core.domain.exceptions import InvalidDurationError, LogQueryTimeoutError
from licenses.application.handlers import list_logs_handler
from licenses.application.handlers.dashboard_stats_handler import DashboardStatsHandler
from licenses.application.handlers.list_logs_handler import (
    ListAdminLogsHandler,
    ListCheckLogsHandler,
)
from licenses.application.queries.dashboard_stats import DashboardStatsQuery
from licenses.application.queries.list_logs import ListAdminLogsQuery, ListCheckLogsQuery
from licenses.ports.audit_log import AuditLogReader
from licenses.ports.stats import StatsReader

EMPTY_STATS = {
    "total_products": 0,
    "total_products_change": 0,
    "total_licenses": 0,
    "total_licenses_change": 0,
    "total_license_checks": 0,
    "total_license_checks_change": 0,
    "total_license_check_errors": 0,
    "total_license_check_errors_change": 0,
    "total_admin_actions": 0,
    "recent_admin_logs": [],
}


class RecordingLogReader(AuditLogReader):
    """In-memory reader recording its filters, optionally slow."""

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.calls = []

    async def list_checks(self, **filters):
        self.calls.append(("checks", filters))
        await asyncio.sleep(self.delay)
        return [{"license_key": "K"}], 7

    async def list_admin_actions(self, **filters):
        self.calls.append(("admin", filters))
        await asyncio.sleep(self.delay)
        return [], 0


class RecordingStatsReader(StatsReader):
    """In-memory stats reader, optionally slow."""

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.calls = []

    async def dashboard_stats(self, owner_id, since, now):
        self.calls.append({"owner_id": owner_id, "since": since, "now": now})
        await asyncio.sleep(self.delay)
        return dict(EMPTY_STATS, total_products=2)


@pytest.fixture
def short_deadline(monkeypatch):
    monkeypatch.setattr(list_logs_handler, "LOG_QUERY_TIMEOUT", 0.05)


@pytest.mark.asyncio
class TestListLogsHandlers:
    """Tests for ListCheckLogsHandler and ListAdminLogsHandler."""

    async def test_check_log_filters_and_paging(self):
        """Test that filters and the page offset reach the reader."""
        reader = RecordingLogReader()
        group_id = uuid.uuid4()

        page = await ListCheckLogsHandler(reader).handle(
            ListCheckLogsQuery(page=3, limit=5, product_group_id=group_id, status_code=404)
        )

        assert page.total == 7
        assert page.page == 3
        _, filters = reader.calls[0]
        assert filters["product_group_id"] == group_id
        assert filters["status_code"] == 404
        assert filters["offset"] == 10

    async def test_admin_log_owner_filter(self):
        """Test that the owner filter reaches the reader."""
        reader = RecordingLogReader()

        await ListAdminLogsHandler(reader).handle(ListAdminLogsQuery(owner_id="acme"))

        _, filters = reader.calls[0]
        assert filters["owner_id"] == "acme"
        assert filters["action"] is None

    @pytest.mark.usefixtures("short_deadline")
    async def test_slow_check_log_read_times_out(self):
        """Test that a read slower than the deadline raises LogQueryTimeoutError."""
        handler = ListCheckLogsHandler(RecordingLogReader(delay=1.0))

        with pytest.raises(LogQueryTimeoutError):
            await handler.handle(ListCheckLogsQuery())

    @pytest.mark.usefixtures("short_deadline")
    async def test_slow_admin_log_read_times_out(self):
        """Test the deadline on admin log reads."""
        handler = ListAdminLogsHandler(RecordingLogReader(delay=1.0))

        with pytest.raises(LogQueryTimeoutError) as exc_info:
            await handler.handle(ListAdminLogsQuery())

        assert exc_info.value.code == "LOG_QUERY_TIMEOUT"


@pytest.mark.asyncio
class TestDashboardStatsHandler:
    """Tests for DashboardStatsHandler."""

    async def test_window_reads_duration_backwards(self):
        """Test that 7d looks back seven days from now."""
        reader = RecordingStatsReader()

        stats = await DashboardStatsHandler(reader).handle(
            DashboardStatsQuery(owner_id="acme", duration="7d")
        )

        assert stats.total_products == 2
        call = reader.calls[0]
        assert call["owner_id"] == "acme"
        assert call["now"] - call["since"] == timedelta(days=7)

    async def test_default_window_is_thirty_days(self):
        reader = RecordingStatsReader()

        await DashboardStatsHandler(reader).handle(DashboardStatsQuery())

        call = reader.calls[0]
        assert call["now"] - call["since"] == timedelta(days=30)

    @pytest.mark.parametrize("duration", ["soon", "5000y"])
    async def test_invalid_duration(self, duration):
        """Test malformed and out-of-range windows."""
        reader = RecordingStatsReader()

        with pytest.raises(InvalidDurationError):
            await DashboardStatsHandler(reader).handle(DashboardStatsQuery(duration=duration))

        assert reader.calls == []

    @pytest.mark.usefixtures("short_deadline")
    async def test_slow_stats_read_times_out(self):
        handler = DashboardStatsHandler(RecordingStatsReader(delay=1.0))

        with pytest.raises(LogQueryTimeoutError):
            await handler.handle(DashboardStatsQuery())
