"""
Pytest configuration and shared fixtures.
"""

import uuid
from typing import Dict, List, Optional, Tuple

import pytest
from asgiref.sync import async_to_sync

from core.domain.exceptions import DuplicateLicenseKeyError, LicenseNotFoundError
from core.domain.value_objects import LicenseDefaults
from licenses.domain.license import License
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from licenses.ports.audit_log import AdminLogEntry, AuditLogPort, LicenseCheckLogEntry
from licenses.ports.license_repository import LicenseRepository
from products.domain.product import Product, ProductGroup
from products.infrastructure.repositories.django_product_repository import (
    DjangoProductGroupRepository,
    DjangoProductRepository,
)
from products.ports.product_repository import ProductGroupRepository, ProductRepository

ADMIN_SECRET = "test-admin-secret"


class InMemoryLicenseRepository(LicenseRepository):
    """LicenseRepository keeping licenses in a dict keyed by license key."""

    def __init__(self):
        self.licenses: Dict[str, License] = {}
        self.admit_calls: List[Tuple[str, str, int]] = []

    async def create(self, license: License) -> License:
        if license.key in self.licenses:
            raise DuplicateLicenseKeyError()
        self.licenses[license.key] = license
        return license

    async def update(self, license: License) -> License:
        if license.key not in self.licenses:
            raise LicenseNotFoundError()
        self.licenses[license.key] = license
        return license

    async def find_by_key(self, key: str) -> Optional[License]:
        return self.licenses.get(key)

    async def delete(self, key: str) -> bool:
        return self.licenses.pop(key, None) is not None

    async def admit_ip(self, key: str, ip: str, limit: int) -> bool:
        self.admit_calls.append((key, ip, limit))
        license = self.licenses.get(key)
        if license is None:
            raise LicenseNotFoundError()
        if ip in license.allowed_ips:
            return True
        if len(license.allowed_ips) >= limit:
            return False
        self.licenses[key] = license.with_changes(allowed_ips=[*license.allowed_ips, ip])
        return True

    async def list(self, owner_id=None, limit=100, offset=0):
        items = [
            license
            for license in self.licenses.values()
            if not owner_id or license.owner_id == owner_id
        ]
        return items[offset : offset + limit], len(items)


class InMemoryProductRepository(ProductRepository):
    """ProductRepository backed by a dict."""

    def __init__(self):
        self.products: Dict[uuid.UUID, Product] = {}

    async def save(self, product: Product) -> Product:
        self.products[product.id] = product
        return product

    async def find_by_id(self, product_id: uuid.UUID) -> Optional[Product]:
        return self.products.get(product_id)


class InMemoryProductGroupRepository(ProductGroupRepository):
    """ProductGroupRepository backed by a dict."""

    def __init__(self):
        self.groups: Dict[uuid.UUID, ProductGroup] = {}

    async def save(self, group: ProductGroup) -> ProductGroup:
        self.groups[group.id] = group
        return group

    async def find_by_id(self, group_id: uuid.UUID) -> Optional[ProductGroup]:
        return self.groups.get(group_id)


class RecordingAuditLog(AuditLogPort):
    """AuditLogPort collecting entries in lists."""

    def __init__(self):
        self.checks: List[LicenseCheckLogEntry] = []
        self.admin_actions: List[AdminLogEntry] = []

    async def record_check(self, entry: LicenseCheckLogEntry) -> None:
        self.checks.append(entry)

    async def record_admin_action(self, entry: AdminLogEntry) -> None:
        self.admin_actions.append(entry)


@pytest.fixture
def license_defaults():
    """Fixture for the service-wide key defaults."""
    return LicenseDefaults(prefix="LICENSE", separator="-", charset="", length=12)


@pytest.fixture
def memory_license_repository():
    """Fixture for an in-memory LicenseRepository."""
    return InMemoryLicenseRepository()


@pytest.fixture
def memory_product_repository():
    """Fixture for an in-memory ProductRepository."""
    return InMemoryProductRepository()


@pytest.fixture
def memory_product_group_repository():
    """Fixture for an in-memory ProductGroupRepository."""
    return InMemoryProductGroupRepository()


@pytest.fixture
def audit_log():
    """Fixture for a recording audit log."""
    return RecordingAuditLog()


@pytest.fixture
def sample_group():
    """Fixture for a sample ProductGroup entity."""
    return ProductGroup.create(
        name="Office Suite",
        license_prefix="SUITE",
        license_separator="_",
        license_charset="A-Z",
        license_length=8,
    )


@pytest.fixture
def sample_product(sample_group):
    """Fixture for a sample Product entity in sample_group."""
    return Product.create(name="Writer", product_group_id=sample_group.id)


@pytest.fixture
def sample_license(sample_product):
    """Fixture for an unrestricted License entity."""
    return License.create(key="LICENSE-abcDEF123456", product_id=sample_product.id)


@pytest.fixture
def license_repository():
    """Fixture for LicenseRepository."""
    return DjangoLicenseRepository()


@pytest.fixture
def product_repository():
    """Fixture for ProductRepository."""
    return DjangoProductRepository()


@pytest.fixture
def product_group_repository():
    """Fixture for ProductGroupRepository."""
    return DjangoProductGroupRepository()


@pytest.fixture
def db_product_group(db, product_group_repository):
    """Fixture for a ProductGroup saved in database."""
    group = ProductGroup.create(
        name=f"Group{uuid.uuid4().hex[:8]}",
        license_prefix="GRP",
        license_charset="A-Z,0-9",
        license_length=10,
    )
    return async_to_sync(product_group_repository.save)(group)


@pytest.fixture
def db_product(db, db_product_group, product_repository):
    """Fixture for a Product saved in database, inside db_product_group."""
    product = Product.create(name="Writer", product_group_id=db_product_group.id)
    return async_to_sync(product_repository.save)(product)


@pytest.fixture
def db_license(db, db_product, license_repository):
    """Fixture for an unrestricted License saved in database."""
    license = License.create(key=f"GRP-{uuid.uuid4().hex[:10].upper()}", product_id=db_product.id)
    return async_to_sync(license_repository.create)(license)


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def admin_client(api_client):
    """Fixture for an API client carrying the admin secret."""
    api_client.credentials(HTTP_X_API_KEY=ADMIN_SECRET)
    return api_client
