"""
Product, ProductGroup, Feature and Release models.
"""
import uuid

from django.core.exceptions import ValidationError
from django.db import models

LICENSE_TYPE_CHOICES = [
    ("perpetual", "Perpetual"),
    ("timed", "Timed"),
    ("trial", "Trial"),
]


class LicenseDefaultsMixin(models.Model):
    """Key-generation defaults and auto-allow policy shared by products and groups."""

    license_prefix = models.CharField(max_length=50, blank=True, default="")
    license_separator = models.CharField(max_length=5, blank=True, default="")
    license_charset = models.CharField(
        max_length=255, blank=True, default="", help_text="Comma-separated ranges, e.g. A-Z,0-9"
    )
    license_length = models.PositiveIntegerField(default=0, help_text="0 means inherit")
    auto_allowed_ip = models.BooleanField(default=False)
    auto_allowed_ip_limit = models.PositiveIntegerField(default=0)

    class Meta:
        abstract = True


class ProductGroup(LicenseDefaultsMixin):
    """
    A group of products sharing license-generation defaults.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner_id = models.CharField(max_length=255, null=True, blank=True, db_index=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "product_groups"
        ordering = ["name"]

    def __str__(self):
        return self.name


class Product(LicenseDefaultsMixin):
    """
    Represents a product that can be licensed.
    Products optionally belong to a group they inherit defaults from.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner_id = models.CharField(max_length=255, null=True, blank=True, db_index=True)
    name = models.CharField(max_length=255, help_text="Product display name")
    description = models.TextField(blank=True, default="")
    product_group = models.ForeignKey(
        ProductGroup,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )
    license_type = models.CharField(
        max_length=20, choices=LICENSE_TYPE_CHOICES, blank=True, default=""
    )
    license_duration = models.CharField(
        max_length=20, blank=True, default="", help_text="e.g. 30d, 6mo, 1y"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "products"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["product_group"]),
        ]

    def __str__(self):
        return self.name


class ScopedCodeModel(models.Model):
    """A code scoped to exactly one of a product, a group, or global (neither)."""

    product = models.ForeignKey(Product, on_delete=models.CASCADE, null=True, blank=True)
    product_group = models.ForeignKey(
        ProductGroup, on_delete=models.CASCADE, null=True, blank=True
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True

    def clean(self):
        """A code cannot belong to both a product and a group."""
        if self.product_id and self.product_group_id:
            raise ValidationError("Scope to either a product or a product group, not both")

    def save(self, *args, **kwargs):
        """Save with scope validation."""
        self.clean()
        super().save(*args, **kwargs)


class Feature(ScopedCodeModel):
    """A feature flag that licenses can enable."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.CharField(max_length=100, db_index=True)
    name = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        db_table = "features"
        ordering = ["code"]

    def __str__(self):
        return self.code


class Release(ScopedCodeModel):
    """A release version that licenses can be restricted to."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    version = models.CharField(max_length=100, db_index=True)

    class Meta:
        db_table = "releases"
        ordering = ["version"]

    def __str__(self):
        return self.version
