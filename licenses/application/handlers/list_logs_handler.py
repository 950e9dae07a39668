"""
Audit log query handlers.

Log reads run under LOG_QUERY_TIMEOUT; a read that misses it surfaces as
LogQueryTimeoutError instead of holding the request open.
"""
import asyncio
from typing import Awaitable, TypeVar

from core.domain.exceptions import LogQueryTimeoutError
from licenses.application.dto.license_dto import LogPageDTO
from licenses.application.queries.list_logs import ListAdminLogsQuery, ListCheckLogsQuery
from licenses.ports.audit_log import AuditLogReader

# Seconds
LOG_QUERY_TIMEOUT = 5.0

T = TypeVar("T")


async def with_log_deadline(read: Awaitable[T]) -> T:
    """
    Await a log read, giving up after LOG_QUERY_TIMEOUT seconds.

    Raises:
        LogQueryTimeoutError: If the read does not finish in time
    """
    try:
        return await asyncio.wait_for(read, timeout=LOG_QUERY_TIMEOUT)
    except asyncio.TimeoutError as exc:
        raise LogQueryTimeoutError() from exc


class ListCheckLogsHandler:
    """Handler for ListCheckLogsQuery."""

    def __init__(self, audit_log_reader: AuditLogReader):
        self.audit_log_reader = audit_log_reader

    async def handle(self, query: ListCheckLogsQuery) -> LogPageDTO:
        """Return one page of license check logs."""
        items, total = await with_log_deadline(
            self.audit_log_reader.list_checks(
                license_key=query.license_key,
                product_id=query.product_id,
                product_group_id=query.product_group_id,
                status_code=query.status_code,
                limit=query.limit,
                offset=query.offset,
            )
        )
        return LogPageDTO(items=items, total=total, page=query.page, limit=query.limit)


class ListAdminLogsHandler:
    """Handler for ListAdminLogsQuery."""

    def __init__(self, audit_log_reader: AuditLogReader):
        self.audit_log_reader = audit_log_reader

    async def handle(self, query: ListAdminLogsQuery) -> LogPageDTO:
        """Return one page of admin action logs."""
        items, total = await with_log_deadline(
            self.audit_log_reader.list_admin_actions(
                action=query.action,
                owner_id=query.owner_id,
                limit=query.limit,
                offset=query.offset,
            )
        )
        return LogPageDTO(items=items, total=total, page=query.page, limit=query.limit)
