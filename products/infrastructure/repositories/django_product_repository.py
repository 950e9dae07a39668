"""
Django implementations of the product repository ports.

These adapters convert between domain entities and Django ORM models.
"""

import uuid
from typing import Optional

from asgiref.sync import sync_to_async

from core.domain.value_objects import LicenseType
from products.domain.product import Product, ProductGroup
from products.infrastructure.models import Product as ProductModel
from products.infrastructure.models import ProductGroup as ProductGroupModel
from products.ports.product_repository import ProductGroupRepository, ProductRepository

_DEFAULT_FIELDS = (
    "owner_id",
    "name",
    "description",
    "license_prefix",
    "license_separator",
    "license_charset",
    "license_length",
    "auto_allowed_ip",
    "auto_allowed_ip_limit",
)


class DjangoProductRepository(ProductRepository):
    """Django ORM implementation of ProductRepository."""

    def _to_domain(self, model: ProductModel) -> Product:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Product model

        Returns:
            Product domain entity
        """
        return Product(
            id=model.id,
            product_group_id=model.product_group_id,
            license_type=LicenseType(model.license_type) if model.license_type else None,
            license_duration=model.license_duration,
            created_at=model.created_at,
            updated_at=model.updated_at,
            **{field: getattr(model, field) for field in _DEFAULT_FIELDS},
        )

    @sync_to_async
    def save(self, product: Product) -> Product:
        """
        Save a product entity.

        Args:
            product: Product entity to save

        Returns:
            Saved product entity
        """
        values = {field: getattr(product, field) for field in _DEFAULT_FIELDS}
        values.update(
            product_group_id=product.product_group_id,
            license_type=product.license_type.value if product.license_type else "",
            license_duration=product.license_duration,
        )
        model, _ = ProductModel.objects.update_or_create(id=product.id, defaults=values)
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, product_id: uuid.UUID) -> Optional[Product]:
        """
        Find a product by ID.

        Args:
            product_id: Product UUID

        Returns:
            Product entity or None if not found
        """
        try:
            return self._to_domain(ProductModel.objects.get(id=product_id))
        except ProductModel.DoesNotExist:
            return None


class DjangoProductGroupRepository(ProductGroupRepository):
    """Django ORM implementation of ProductGroupRepository."""

    def _to_domain(self, model: ProductGroupModel) -> ProductGroup:
        return ProductGroup(
            id=model.id,
            created_at=model.created_at,
            updated_at=model.updated_at,
            **{field: getattr(model, field) for field in _DEFAULT_FIELDS},
        )

    @sync_to_async
    def save(self, group: ProductGroup) -> ProductGroup:
        """Save a product group entity."""
        values = {field: getattr(group, field) for field in _DEFAULT_FIELDS}
        model, _ = ProductGroupModel.objects.update_or_create(id=group.id, defaults=values)
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, group_id: uuid.UUID) -> Optional[ProductGroup]:
        """Find a product group by ID."""
        try:
            return self._to_domain(ProductGroupModel.objects.get(id=group_id))
        except ProductGroupModel.DoesNotExist:
            return None
