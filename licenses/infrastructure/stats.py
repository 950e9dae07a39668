"""
Dashboard statistics over the Django ORM.
"""
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from asgiref.sync import sync_to_async
from django.db.models import Q, QuerySet

from licenses.infrastructure.audit_log import admin_log_to_dict
from licenses.infrastructure.models import AdminLog, License, LicenseCheckLog
from licenses.ports.stats import StatsReader
from products.infrastructure.models import Product

RECENT_ADMIN_LOGS = 3
GROWTH_WINDOW = timedelta(days=30)
CHECKS_WINDOW = timedelta(hours=24)

# Missing key, unknown key, or a license reported unusable
CHECK_ERROR = ~Q(status_code=200) | Q(response_payload__valid=False)


def _window_change(queryset: QuerySet, now: datetime) -> int:
    """Records in the last CHECKS_WINDOW minus records in the one before it."""
    recent = queryset.filter(created_at__gte=now - CHECKS_WINDOW).count()
    previous = queryset.filter(
        created_at__gte=now - 2 * CHECKS_WINDOW, created_at__lt=now - CHECKS_WINDOW
    ).count()
    return recent - previous


class DjangoStatsReader(StatsReader):
    """Django ORM implementation of StatsReader."""

    @sync_to_async
    def dashboard_stats(
        self, owner_id: Optional[str], since: datetime, now: datetime
    ) -> Dict[str, Any]:
        """Count products, licenses, checks and admin actions."""
        products = Product.objects.all()
        licenses = License.objects.all()
        checks = LicenseCheckLog.objects.all()
        admin_logs = AdminLog.objects.all()
        if owner_id:
            products = products.filter(owner_id=owner_id)
            licenses = licenses.filter(owner_id=owner_id)
            # Check logs are attributed to the owner of the product checked
            checks = checks.filter(product_id__in=products.values("id"))
            admin_logs = admin_logs.filter(owner_id=owner_id)
        errors = checks.filter(CHECK_ERROR)

        return {
            "total_products": products.count(),
            "total_products_change": products.filter(created_at__gte=now - GROWTH_WINDOW).count(),
            "total_licenses": licenses.count(),
            "total_licenses_change": licenses.filter(created_at__gte=now - GROWTH_WINDOW).count(),
            "total_license_checks": checks.filter(created_at__gte=since).count(),
            "total_license_checks_change": _window_change(checks, now),
            "total_license_check_errors": errors.filter(created_at__gte=since).count(),
            "total_license_check_errors_change": _window_change(errors, now),
            "total_admin_actions": admin_logs.filter(created_at__gte=since).count(),
            "recent_admin_logs": [
                admin_log_to_dict(log) for log in admin_logs[:RECENT_ADMIN_LOGS]
            ],
        }
