"""
Audit log adapters.

CeleryAuditLog hands entries to background tasks; DjangoAuditLogReader
serves the log listing endpoints.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from asgiref.sync import sync_to_async

from core.tasks import record_admin_action_task, record_license_check_task
from licenses.infrastructure.models import AdminLog, LicenseCheckLog
from licenses.ports.audit_log import (
    AdminLogEntry,
    AuditLogPort,
    AuditLogReader,
    LicenseCheckLogEntry,
)
from products.infrastructure.models import Product

logger = logging.getLogger(__name__)


class CeleryAuditLog(AuditLogPort):
    """
    Fire-and-forget audit log writer.

    Enqueue failures are logged and never reach the caller.
    """

    async def _enqueue(self, task, payload: Dict[str, Any]) -> None:
        try:
            await sync_to_async(task.delay)(payload)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.error("Failed to enqueue %s: %s", task.name, exc, exc_info=True)

    async def record_check(self, entry: LicenseCheckLogEntry) -> None:
        """Enqueue a license check log write."""
        await self._enqueue(record_license_check_task, entry.to_payload())

    async def record_admin_action(self, entry: AdminLogEntry) -> None:
        """Enqueue an admin log write."""
        await self._enqueue(record_admin_action_task, entry.to_payload())


def check_log_to_dict(model: LicenseCheckLog) -> Dict[str, Any]:
    return {
        "id": model.id,
        "license_key": model.license_key,
        "license_id": model.license_id,
        "product_id": model.product_id,
        "request_payload": model.request_payload,
        "response_payload": model.response_payload,
        "ip_address": model.ip_address,
        "user_agent": model.user_agent,
        "status_code": model.status_code,
        "created_at": model.created_at,
    }


def admin_log_to_dict(model: AdminLog) -> Dict[str, Any]:
    return {
        "id": model.id,
        "entity_type": model.entity_type,
        "entity_id": model.entity_id,
        "action": model.action,
        "details": model.details,
        "actor": model.actor,
        "owner_id": model.owner_id,
        "ip_address": model.ip_address,
        "created_at": model.created_at,
    }


class DjangoAuditLogReader(AuditLogReader):
    """Django ORM implementation of AuditLogReader."""

    @sync_to_async
    def list_checks(
        self,
        license_key: Optional[str] = None,
        product_id: Optional[uuid.UUID] = None,
        product_group_id: Optional[uuid.UUID] = None,
        status_code: Optional[int] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """List check log records matching the filters, newest first, with the total count."""
        queryset = LicenseCheckLog.objects.all()
        if license_key:
            queryset = queryset.filter(license_key=license_key)
        if product_id:
            queryset = queryset.filter(product_id=product_id)
        if product_group_id:
            # Check logs keep the product id only; resolve the group through products
            queryset = queryset.filter(
                product_id__in=Product.objects.filter(product_group_id=product_group_id).values("id")
            )
        if status_code:
            queryset = queryset.filter(status_code=status_code)
        total = queryset.count()
        return [check_log_to_dict(m) for m in queryset[offset : offset + limit]], total

    @sync_to_async
    def list_admin_actions(
        self,
        action: Optional[str] = None,
        owner_id: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """List admin log records, newest first, with the total count."""
        queryset = AdminLog.objects.all()
        if action:
            queryset = queryset.filter(action=action)
        if owner_id:
            queryset = queryset.filter(owner_id=owner_id)
        total = queryset.count()
        return [admin_log_to_dict(m) for m in queryset[offset : offset + limit]], total
