"""
Product repository ports (interfaces).

These define the contract for product and product group persistence.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Optional
import uuid

from products.domain.product import Product, ProductGroup


class ProductRepository(ABC):
    """
    Abstract repository for Product entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def save(self, product: Product) -> Product:
        """
        Save a product entity.

        Args:
            product: Product entity to save

        Returns:
            Saved product entity
        """
        pass

    @abstractmethod
    async def find_by_id(self, product_id: uuid.UUID) -> Optional[Product]:
        """
        Find a product by ID.

        Args:
            product_id: Product UUID

        Returns:
            Product entity or None if not found
        """
        pass


class ProductGroupRepository(ABC):
    """Abstract repository for ProductGroup entities."""

    @abstractmethod
    async def save(self, group: ProductGroup) -> ProductGroup:
        """Save a product group entity."""
        pass

    @abstractmethod
    async def find_by_id(self, group_id: uuid.UUID) -> Optional[ProductGroup]:
        """Find a product group by ID, or None if not found."""
        pass
