"""
Integration tests for repository implementations.
"""

import uuid
from datetime import timedelta

import pytest
from asgiref.sync import async_to_sync
from django.utils import timezone

from core.domain.exceptions import DuplicateLicenseKeyError, LicenseNotFoundError
from core.domain.value_objects import LicenseStatus, LicenseType
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel
from products.domain.product import Product, ProductGroup
from products.infrastructure.models import Feature, Release
from products.infrastructure.models import Product as ProductModel


def _license(product_id, **restrictions) -> License:
    return License.create(
        key=f"INT-{uuid.uuid4().hex[:12].upper()}", product_id=product_id, **restrictions
    )


@pytest.mark.django_db
@pytest.mark.integration
class TestProductRepositories:
    """Integration tests for product and group repositories."""

    def test_save_and_find_group(self, product_group_repository):
        """Test saving and finding a product group."""
        group = ProductGroup.create(name="Suite", license_prefix="SUITE", auto_allowed_ip=True)

        async_to_sync(product_group_repository.save)(group)
        found = async_to_sync(product_group_repository.find_by_id)(group.id)

        assert found.name == "Suite"
        assert found.license_prefix == "SUITE"
        assert found.auto_allowed_ip is True

    def test_save_and_find_product(self, product_repository, db_product_group):
        """Test saving and finding a product with type and duration."""
        product = Product.create(
            name="Reader",
            product_group_id=db_product_group.id,
            license_type=LicenseType.TIMED,
            license_duration="30d",
        )

        async_to_sync(product_repository.save)(product)
        found = async_to_sync(product_repository.find_by_id)(product.id)

        assert found.product_group_id == db_product_group.id
        assert found.license_type == LicenseType.TIMED
        assert found.license_duration == "30d"

    def test_find_not_found(self, db, product_repository, product_group_repository):
        """Test finding non-existent products and groups."""
        assert async_to_sync(product_repository.find_by_id)(uuid.uuid4()) is None
        assert async_to_sync(product_group_repository.find_by_id)(uuid.uuid4()) is None


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseRepository:
    """Integration tests for LicenseRepository."""

    def test_create_and_find(self, license_repository, db_product):
        """Test creating and finding a license."""
        expires_at = timezone.now() + timedelta(days=365)
        license = _license(
            db_product.id,
            license_type=LicenseType.TIMED,
            owner_id="owner-1",
            allowed_ips=["10.0.0.1"],
            allowed_networks=["192.168.0.0/16"],
            expires_at=expires_at,
        )

        async_to_sync(license_repository.create)(license)
        found = async_to_sync(license_repository.find_by_key)(license.key)

        assert found.id == license.id
        assert found.type == LicenseType.TIMED
        assert found.status == LicenseStatus.ACTIVE
        assert found.owner_id == "owner-1"
        assert found.allowed_ips == ["10.0.0.1"]
        assert found.allowed_networks == ["192.168.0.0/16"]
        assert found.expires_at == expires_at

    def test_duplicate_key(self, license_repository, db_product):
        """Test that a duplicate key raises DuplicateLicenseKeyError."""
        license = _license(db_product.id)
        async_to_sync(license_repository.create)(license)

        duplicate = License.create(key=license.key, product_id=db_product.id)
        with pytest.raises(DuplicateLicenseKeyError):
            async_to_sync(license_repository.create)(duplicate)

    def test_links_only_visible_entitlements(
        self, license_repository, db_product, db_product_group
    ):
        """Test that codes scoped to the product, its group or global are linked."""
        Feature.objects.create(code="product-feature", product_id=db_product.id)
        Feature.objects.create(code="group-feature", product_group_id=db_product_group.id)
        Feature.objects.create(code="global-feature")
        other_model = ProductModel.objects.create(name="Other")
        Feature.objects.create(code="foreign-feature", product=other_model)
        Release.objects.create(version="1.0.0", product_id=db_product.id)
        Release.objects.create(version="2.0.0", product=other_model)

        created = async_to_sync(license_repository.create)(
            _license(
                db_product.id,
                features=["product-feature", "group-feature", "global-feature", "foreign-feature"],
                releases=["1.0.0", "2.0.0"],
            )
        )

        assert sorted(created.features) == ["global-feature", "group-feature", "product-feature"]
        assert created.releases == ["1.0.0"]

    def test_update(self, license_repository, db_license):
        """Test persisting changes."""
        changed = db_license.with_changes(
            status=LicenseStatus.REVOKED, allowed_networks=["10.0.0.0/8"], owner_id="new"
        )

        async_to_sync(license_repository.update)(changed)
        found = async_to_sync(license_repository.find_by_key)(db_license.key)

        assert found.status == LicenseStatus.REVOKED
        assert found.allowed_networks == ["10.0.0.0/8"]
        assert found.owner_id == "new"

    def test_update_not_found(self, license_repository, db_product):
        """Test that updating a missing key raises."""
        with pytest.raises(LicenseNotFoundError):
            async_to_sync(license_repository.update)(_license(db_product.id))

    def test_delete(self, license_repository, db_license):
        """Test hard delete."""
        assert async_to_sync(license_repository.delete)(db_license.key) is True
        assert async_to_sync(license_repository.find_by_key)(db_license.key) is None
        assert async_to_sync(license_repository.delete)(db_license.key) is False

    def test_admit_ip_grows_to_limit(self, license_repository, db_license):
        """Test admission up to the limit, idempotent for known IPs."""
        admit = async_to_sync(license_repository.admit_ip)

        assert admit(db_license.key, "198.51.100.1", 2) is True
        assert admit(db_license.key, "198.51.100.1", 2) is True
        assert admit(db_license.key, "198.51.100.2", 2) is True
        assert admit(db_license.key, "198.51.100.3", 2) is False

        stored = LicenseModel.objects.get(key=db_license.key)
        assert stored.allowed_ips == ["198.51.100.1", "198.51.100.2"]

    def test_admit_ip_unknown_key(self, db, license_repository):
        """Test admission for a missing license."""
        with pytest.raises(LicenseNotFoundError):
            async_to_sync(license_repository.admit_ip)("NOPE", "10.0.0.1", 1)

    def test_admit_ip_keeps_other_fields(self, license_repository, db_license):
        """Test that admission only touches allowed_ips."""
        async_to_sync(license_repository.update)(db_license.with_changes(owner_id="keeper"))
        async_to_sync(license_repository.admit_ip)(db_license.key, "10.0.0.9", 5)

        found = async_to_sync(license_repository.find_by_key)(db_license.key)
        assert found.owner_id == "keeper"
        assert found.allowed_ips == ["10.0.0.9"]

    def test_list(self, license_repository, db_product):
        """Test listing with owner filter and paging."""
        for index in range(3):
            async_to_sync(license_repository.create)(
                _license(db_product.id, owner_id="alice" if index < 2 else "bob")
            )

        items, total = async_to_sync(license_repository.list)(owner_id="alice", limit=1, offset=0)
        assert total == 2
        assert len(items) == 1
        assert items[0].owner_id == "alice"

        _, everyone = async_to_sync(license_repository.list)()
        assert everyone == 3
