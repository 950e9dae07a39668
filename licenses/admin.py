"""
Django admin configuration for licenses app.
"""
import json

from django.contrib import admin
from django.utils.html import format_html

from licenses.infrastructure.models import AdminLog, License, LicenseCheckLog


def _json_block(value):
    if not value:
        return "-"
    return format_html(
        '<pre style="background: #f5f5f5; padding: 10px; '
        'border-radius: 4px; overflow-x: auto;">{}</pre>',
        json.dumps(value, indent=2),
    )


class ReadOnlyAdminMixin:
    """Log records are written by the service only."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(License)
class LicenseAdmin(admin.ModelAdmin):
    """Admin interface for License model."""

    list_display = [
        "key",
        "product",
        "type",
        "status_display",
        "owner_id",
        "expires_at",
        "created_at",
    ]
    list_filter = ["status", "type", "expires_at", "created_at", "product"]
    search_fields = ["key", "owner_id", "product__name"]
    readonly_fields = ["id", "key", "created_at", "updated_at"]
    filter_horizontal = ["features", "releases"]
    fieldsets = (
        (
            "Basic Information",
            {"fields": ("id", "key", "product", "type", "status", "owner_id")},
        ),
        (
            "Access Restrictions",
            {
                "fields": (
                    "allowed_ips",
                    "allowed_networks",
                    "auto_allowed_ip",
                    "auto_allowed_ip_limit",
                ),
            },
        ),
        ("Entitlements", {"fields": ("features", "releases")}),
        ("Expiration", {"fields": ("expires_at",)}),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def status_display(self, obj):
        """Display status with color coding."""
        colors = {
            "active": "green",
            "revoked": "red",
            "expired": "gray",
        }
        status = "expired" if obj.status == "active" and not obj.is_valid else obj.status
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            colors.get(status, "black"),
            status.upper(),
        )

    status_display.short_description = "Status"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("product")


@admin.register(LicenseCheckLog)
class LicenseCheckLogAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Admin interface for LicenseCheckLog model."""

    list_display = ["license_key", "status_code", "ip_address", "created_at"]
    list_filter = ["status_code", "created_at"]
    search_fields = ["license_key", "ip_address", "user_agent"]
    readonly_fields = ["id", "created_at", "request_display", "response_display"]
    exclude = ["request_payload", "response_payload"]

    def request_display(self, obj):
        """Display the request payload."""
        return _json_block(obj.request_payload)

    request_display.short_description = "Request"

    def response_display(self, obj):
        """Display the response payload."""
        return _json_block(obj.response_payload)

    response_display.short_description = "Response"


@admin.register(AdminLog)
class AdminLogAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Admin interface for AdminLog model."""

    list_display = ["action", "entity_type", "entity_id", "actor", "ip_address", "created_at"]
    list_filter = ["action", "entity_type", "created_at"]
    search_fields = ["actor", "entity_id"]
    readonly_fields = ["id", "created_at", "details_display"]
    exclude = ["details"]

    def details_display(self, obj):
        """Display details in a formatted way."""
        return _json_block(obj.details)

    details_display.short_description = "Details"
