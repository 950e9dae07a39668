"""
Django admin configuration for products app.
"""

from django.contrib import admin

from products.infrastructure.models import Feature, Product, ProductGroup, Release

LICENSE_DEFAULTS_FIELDSET = (
    "License Defaults",
    {
        "fields": (
            "license_prefix",
            "license_separator",
            "license_charset",
            "license_length",
            "auto_allowed_ip",
            "auto_allowed_ip_limit",
        ),
        "description": "Empty values are inherited from the group, then the service defaults.",
    },
)

TIMESTAMPS_FIELDSET = (
    "Timestamps",
    {
        "fields": ("created_at", "updated_at"),
        "classes": ("collapse",),
    },
)


@admin.register(ProductGroup)
class ProductGroupAdmin(admin.ModelAdmin):
    """Admin interface for ProductGroup model."""

    list_display = ["name", "owner_id", "license_prefix", "product_count", "created_at"]
    list_filter = ["auto_allowed_ip", "created_at"]
    search_fields = ["name", "owner_id"]
    readonly_fields = ["id", "created_at", "updated_at"]
    fieldsets = (
        ("Basic Information", {"fields": ("id", "name", "owner_id", "description")}),
        LICENSE_DEFAULTS_FIELDSET,
        TIMESTAMPS_FIELDSET,
    )

    def product_count(self, obj):
        """Display number of products in this group."""
        return obj.products.count()

    product_count.short_description = "Products"


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin interface for Product model."""

    list_display = ["name", "product_group", "license_type", "license_count", "created_at"]
    list_filter = ["product_group", "license_type", "created_at", "updated_at"]
    search_fields = ["name", "owner_id", "product_group__name"]
    readonly_fields = ["id", "created_at", "updated_at"]
    fieldsets = (
        (
            "Basic Information",
            {"fields": ("id", "name", "owner_id", "description", "product_group")},
        ),
        ("License Terms", {"fields": ("license_type", "license_duration")}),
        LICENSE_DEFAULTS_FIELDSET,
        TIMESTAMPS_FIELDSET,
    )

    def license_count(self, obj):
        """Display number of licenses for this product."""
        return obj.licenses.count()

    license_count.short_description = "Licenses"

    def get_queryset(self, request):
        """Optimize queryset."""
        return (
            super()
            .get_queryset(request)
            .select_related("product_group")
            .prefetch_related("licenses")
        )


@admin.register(Feature)
class FeatureAdmin(admin.ModelAdmin):
    """Admin interface for Feature model."""

    list_display = ["code", "name", "product", "product_group", "created_at"]
    list_filter = ["product", "product_group"]
    search_fields = ["code", "name"]
    readonly_fields = ["id", "created_at"]


@admin.register(Release)
class ReleaseAdmin(admin.ModelAdmin):
    """Admin interface for Release model."""

    list_display = ["version", "product", "product_group", "created_at"]
    list_filter = ["product", "product_group"]
    search_fields = ["version"]
    readonly_fields = ["id", "created_at"]
