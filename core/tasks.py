"""
Celery tasks for background processing.

Audit log writes are dispatched here so that a slow or failing
log store never delays a license check or an admin action.
"""
import logging

from LicenseKeyService.celery import app

logger = logging.getLogger(__name__)


@app.task(bind=True, max_retries=3)
def record_license_check_task(self, payload: dict):
    """
    Celery task writing one license check log record.

    Args:
        payload: LicenseCheckLogEntry.to_payload() output
    """
    from licenses.infrastructure.models import LicenseCheckLog

    try:
        LicenseCheckLog.objects.create(
            license_key=payload.get("license_key") or "",
            license_id=payload.get("license_id"),
            product_id=payload.get("product_id"),
            request_payload=payload.get("request_payload") or {},
            response_payload=payload.get("response_payload") or {},
            ip_address=payload.get("ip_address"),
            user_agent=payload.get("user_agent") or "",
            status_code=payload["status_code"],
        )
    except Exception as exc:
        logger.error("License check log write failed: %s", exc, exc_info=True)
        raise self.retry(exc=exc, countdown=2 ** self.request.retries)


@app.task(bind=True, max_retries=3)
def record_admin_action_task(self, payload: dict):
    """
    Celery task writing one admin log record.

    Args:
        payload: AdminLogEntry.to_payload() output
    """
    from licenses.infrastructure.models import AdminLog

    try:
        AdminLog.objects.create(
            entity_type=payload.get("entity_type") or "LICENSE",
            entity_id=payload["entity_id"],
            action=payload["action"],
            details=payload.get("details") or {},
            actor=payload.get("actor") or "admin",
            ip_address=payload.get("ip_address"),
            owner_id=payload.get("owner_id"),
        )
    except Exception as exc:
        logger.error("Admin log write failed: %s", exc, exc_info=True)
        raise self.retry(exc=exc, countdown=2 ** self.request.retries)
