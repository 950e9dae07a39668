"""
Product and ProductGroup domain entities.

Products carry the license-generation defaults and auto-allow policy
that keys inherit when they are generated. A group supplies the same
defaults to every product in it.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from core.domain.value_objects import LicenseType


@dataclass(frozen=True)
class ProductGroup:
    """
    ProductGroup domain entity.

    Groups share key-generation defaults across products.
    """

    id: uuid.UUID
    name: str
    owner_id: Optional[str] = None
    description: str = ""
    license_prefix: str = ""
    license_separator: str = ""
    license_charset: str = ""
    license_length: int = 0
    auto_allowed_ip: bool = False
    auto_allowed_ip_limit: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate product group entity."""
        if not self.name or len(self.name.strip()) == 0:
            raise ValueError("Product group name cannot be empty")
        if self.license_length < 0:
            raise ValueError("License length cannot be negative")
        if self.auto_allowed_ip_limit < 0:
            raise ValueError("Auto-allowed IP limit cannot be negative")

    @classmethod
    def create(cls, name: str, group_id: Optional[uuid.UUID] = None, **defaults) -> "ProductGroup":
        """
        Create a new ProductGroup entity.

        Args:
            name: Group display name
            group_id: Optional UUID (generated if not provided)
            **defaults: License-generation defaults and auto-allow policy

        Returns:
            ProductGroup entity instance
        """
        now = datetime.now(timezone.utc)
        return cls(
            id=group_id or uuid.uuid4(),
            name=name.strip(),
            created_at=now,
            updated_at=now,
            **defaults,
        )


@dataclass(frozen=True)
class Product:
    """
    Product domain entity.

    Represents a product that can be licensed, with the defaults
    applied to keys generated for it.
    """

    id: uuid.UUID
    name: str
    owner_id: Optional[str] = None
    description: str = ""
    product_group_id: Optional[uuid.UUID] = None
    license_prefix: str = ""
    license_separator: str = ""
    license_charset: str = ""
    license_length: int = 0
    license_type: Optional[LicenseType] = None
    license_duration: str = ""
    auto_allowed_ip: bool = False
    auto_allowed_ip_limit: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate product entity."""
        if not self.name or len(self.name.strip()) == 0:
            raise ValueError("Product name cannot be empty")
        if len(self.name) > 255:
            raise ValueError("Product name too long")
        if self.license_length < 0:
            raise ValueError("License length cannot be negative")
        if self.auto_allowed_ip_limit < 0:
            raise ValueError("Auto-allowed IP limit cannot be negative")

    @classmethod
    def create(cls, name: str, product_id: Optional[uuid.UUID] = None, **defaults) -> "Product":
        """
        Create a new Product entity.

        Args:
            name: Product display name
            product_id: Optional UUID (generated if not provided)
            **defaults: Group link, license-generation defaults and auto-allow policy

        Returns:
            Product entity instance
        """
        now = datetime.now(timezone.utc)
        return cls(
            id=product_id or uuid.uuid4(),
            name=name.strip(),
            created_at=now,
            updated_at=now,
            **defaults,
        )
