"""
Serializers for the administrative API endpoints.
"""

from rest_framework import serializers

from core.domain.value_objects import AdminAction, LicenseStatus, LicenseType
from licenses.application.queries.dashboard_stats import DEFAULT_STATS_WINDOW
from licenses.application.queries.pagination import DEFAULT_PAGE_SIZE

LICENSE_TYPE_CHOICES = [t.value for t in LicenseType]
LICENSE_STATUS_CHOICES = [s.value for s in LicenseStatus]


class GenerateLicenseRequestSerializer(serializers.Serializer):
    """Serializer for generate license request."""

    product_id = serializers.UUIDField(required=True)
    type = serializers.ChoiceField(choices=LICENSE_TYPE_CHOICES, required=False)
    expires_at = serializers.DateTimeField(required=False, allow_null=True)
    duration = serializers.CharField(required=False, allow_blank=True, max_length=20)
    prefix = serializers.CharField(required=False, allow_blank=True, max_length=50)
    separator = serializers.CharField(required=False, allow_blank=True, max_length=5)
    charset = serializers.CharField(required=False, allow_blank=True, max_length=255)
    length = serializers.IntegerField(required=False, min_value=0, max_value=256)
    feature_codes = serializers.ListField(
        child=serializers.CharField(max_length=100), required=False, default=list
    )
    release_versions = serializers.ListField(
        child=serializers.CharField(max_length=100), required=False, default=list
    )
    allowed_ips = serializers.ListField(
        child=serializers.CharField(max_length=64), required=False, default=list
    )
    allowed_networks = serializers.ListField(
        child=serializers.CharField(max_length=64), required=False, default=list
    )
    owner_id = serializers.CharField(required=False, allow_null=True, max_length=255)
    auto_allowed_ip = serializers.BooleanField(required=False, allow_null=True)
    auto_allowed_ip_limit = serializers.IntegerField(required=False, allow_null=True, min_value=0)


class UpdateLicenseRequestSerializer(serializers.Serializer):
    """Serializer for update license request. Every field is optional."""

    type = serializers.ChoiceField(choices=LICENSE_TYPE_CHOICES, required=False)
    status = serializers.ChoiceField(choices=LICENSE_STATUS_CHOICES, required=False)
    expires_at = serializers.DateTimeField(required=False)
    duration = serializers.CharField(required=False, allow_blank=True, max_length=20)
    feature_codes = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    release_versions = serializers.ListField(
        child=serializers.CharField(max_length=100), required=False
    )
    allowed_ips = serializers.ListField(child=serializers.CharField(max_length=64), required=False)
    allowed_networks = serializers.ListField(
        child=serializers.CharField(max_length=64), required=False
    )
    owner_id = serializers.CharField(required=False, max_length=255)
    auto_allowed_ip = serializers.BooleanField(required=False)
    auto_allowed_ip_limit = serializers.IntegerField(required=False, min_value=0)


class LicenseDTOSerializer(serializers.Serializer):
    """Serializer for LicenseDTO."""

    id = serializers.UUIDField()
    key = serializers.CharField()
    product_id = serializers.UUIDField()
    type = serializers.CharField()
    status = serializers.CharField()
    owner_id = serializers.CharField(allow_null=True)
    allowed_ips = serializers.ListField(child=serializers.CharField())
    allowed_networks = serializers.ListField(child=serializers.CharField())
    auto_allowed_ip = serializers.BooleanField()
    auto_allowed_ip_limit = serializers.IntegerField()
    expires_at = serializers.DateTimeField(allow_null=True)
    features = serializers.ListField(child=serializers.CharField())
    releases = serializers.ListField(child=serializers.CharField())
    created_at = serializers.DateTimeField(allow_null=True)
    updated_at = serializers.DateTimeField(allow_null=True)


class PageQuerySerializer(serializers.Serializer):
    """Serializer for page/limit query parameters."""

    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(required=False, min_value=1, default=DEFAULT_PAGE_SIZE)


class ListLicensesQuerySerializer(PageQuerySerializer):
    """Serializer for list licenses query parameters."""

    owner_id = serializers.CharField(required=False, allow_blank=True, max_length=255)


class LicenseListResponseSerializer(serializers.Serializer):
    """Serializer for LicenseListDTO."""

    items = LicenseDTOSerializer(many=True)
    total = serializers.IntegerField()
    page = serializers.IntegerField()
    limit = serializers.IntegerField()


class MessageResponseSerializer(serializers.Serializer):
    """Serializer for plain confirmation messages."""

    message = serializers.CharField()


class ListCheckLogsQuerySerializer(PageQuerySerializer):
    """Serializer for check log filters."""

    license_key = serializers.CharField(required=False, allow_blank=True, max_length=255)
    product_id = serializers.UUIDField(required=False)
    product_group_id = serializers.UUIDField(required=False)
    status_code = serializers.IntegerField(required=False, min_value=100, max_value=599)


class ListAdminLogsQuerySerializer(PageQuerySerializer):
    """Serializer for admin log filters."""

    action = serializers.ChoiceField(choices=[a.value for a in AdminAction], required=False)
    owner_id = serializers.CharField(required=False, allow_blank=True, max_length=255)


class CheckLogSerializer(serializers.Serializer):
    """Serializer for one license check log record."""

    id = serializers.UUIDField()
    license_key = serializers.CharField()
    license_id = serializers.UUIDField(allow_null=True)
    product_id = serializers.UUIDField(allow_null=True)
    request_payload = serializers.JSONField()
    response_payload = serializers.JSONField()
    ip_address = serializers.CharField(allow_null=True)
    user_agent = serializers.CharField(allow_blank=True)
    status_code = serializers.IntegerField()
    created_at = serializers.DateTimeField()


class AdminLogSerializer(serializers.Serializer):
    """Serializer for one admin action log record."""

    id = serializers.UUIDField()
    entity_type = serializers.CharField()
    entity_id = serializers.CharField()
    action = serializers.CharField()
    details = serializers.JSONField()
    actor = serializers.CharField()
    owner_id = serializers.CharField(allow_null=True)
    ip_address = serializers.CharField(allow_null=True)
    created_at = serializers.DateTimeField()


class CheckLogPageSerializer(serializers.Serializer):
    """Serializer for a page of check logs."""

    items = CheckLogSerializer(many=True)
    total = serializers.IntegerField()
    page = serializers.IntegerField()
    limit = serializers.IntegerField()


class AdminLogPageSerializer(serializers.Serializer):
    """Serializer for a page of admin logs."""

    items = AdminLogSerializer(many=True)
    total = serializers.IntegerField()
    page = serializers.IntegerField()
    limit = serializers.IntegerField()


class DashboardStatsQuerySerializer(serializers.Serializer):
    """Serializer for dashboard statistics query parameters."""

    owner_id = serializers.CharField(required=False, allow_blank=True, max_length=255)
    duration = serializers.CharField(required=False, default=DEFAULT_STATS_WINDOW, max_length=20)


class DashboardStatsSerializer(serializers.Serializer):
    """Serializer for DashboardStatsDTO."""

    total_products = serializers.IntegerField()
    total_products_change = serializers.IntegerField()
    total_licenses = serializers.IntegerField()
    total_licenses_change = serializers.IntegerField()
    total_license_checks = serializers.IntegerField()
    total_license_checks_change = serializers.IntegerField()
    total_license_check_errors = serializers.IntegerField()
    total_license_check_errors_change = serializers.IntegerField()
    total_admin_actions = serializers.IntegerField()
    recent_admin_logs = AdminLogSerializer(many=True)
