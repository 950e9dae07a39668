"""
License, LicenseCheckLog and AdminLog models.
"""
import uuid

from django.db import models
from django.utils import timezone


class License(models.Model):
    """
    A license key bound to one product, with its access restrictions.
    """

    TYPE_CHOICES = [
        ("perpetual", "Perpetual"),
        ("timed", "Timed"),
        ("trial", "Trial"),
    ]

    STATUS_CHOICES = [
        ("active", "Active"),
        ("revoked", "Revoked"),
        ("expired", "Expired"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    key = models.CharField(max_length=255, unique=True, db_index=True)
    product = models.ForeignKey(
        "products.Product", on_delete=models.CASCADE, related_name="licenses"
    )
    owner_id = models.CharField(max_length=255, null=True, blank=True, db_index=True)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default="perpetual")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="active")
    allowed_ips = models.JSONField(default=list, blank=True, help_text="Literal IP addresses")
    allowed_networks = models.JSONField(default=list, blank=True, help_text="CIDR blocks")
    auto_allowed_ip = models.BooleanField(default=False)
    auto_allowed_ip_limit = models.PositiveIntegerField(default=0)
    expires_at = models.DateTimeField(null=True, blank=True)
    features = models.ManyToManyField(
        "products.Feature", blank=True, related_name="licenses", db_table="license_features"
    )
    releases = models.ManyToManyField(
        "products.Release", blank=True, related_name="licenses", db_table="license_releases"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "licenses"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["product", "status"]),
            models.Index(fields=["owner_id", "created_at"]),
        ]

    def __str__(self):
        return self.key

    @property
    def is_valid(self) -> bool:
        """
        Check if license is active and not expired.

        Returns:
            True if license is active and not past its expiry
        """
        if self.status == "revoked":
            return False
        if self.expires_at and self.expires_at < timezone.now():
            return False
        return True


class LicenseCheckLog(models.Model):
    """
    Immutable record of every check request and its outcome.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    license_key = models.CharField(max_length=255, blank=True, db_index=True)
    license_id = models.UUIDField(null=True, blank=True)
    product_id = models.UUIDField(null=True, blank=True)
    request_payload = models.JSONField(default=dict)
    response_payload = models.JSONField(default=dict)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True, default="")
    status_code = models.PositiveSmallIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "license_check_logs"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["license_key", "created_at"]),
            models.Index(fields=["created_at"]),
        ]

    def __str__(self):
        return f"{self.license_key} - {self.status_code}"


class AdminLog(models.Model):
    """
    Immutable audit trail of administrative changes.
    """

    ACTION_CHOICES = [
        ("GENERATE_LICENSE", "Generate License"),
        ("UPDATE_LICENSE", "Update License"),
        ("REVOKE_LICENSE", "Revoke License"),
        ("DELETE_LICENSE", "Delete License"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    entity_type = models.CharField(max_length=50)
    entity_id = models.CharField(max_length=255)
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    details = models.JSONField(default=dict, help_text="Details of the change")
    actor = models.CharField(max_length=255, help_text="Who performed the action")
    owner_id = models.CharField(max_length=255, null=True, blank=True, db_index=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "admin_logs"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["entity_type", "entity_id"]),
            models.Index(fields=["created_at"]),
            models.Index(fields=["action"]),
        ]

    def __str__(self):
        return f"{self.action} - {self.entity_type} {self.entity_id}"
