"""
Django management command to create test data for development and testing.

Creates:
- A superuser (admin/admin)
- A product group with key-format defaults
- A product in that group, with features and releases
- Optionally, a test license for the product
"""

import asyncio
import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from core.config import get_license_defaults
from licenses.application.commands.generate_license import GenerateLicenseCommand
from licenses.application.handlers.generate_license_handler import GenerateLicenseHandler
from licenses.infrastructure.audit_log import CeleryAuditLog
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from products.domain.product import Product, ProductGroup
from products.infrastructure.models import Feature, Release
from products.infrastructure.models import Product as ProductModel
from products.infrastructure.models import ProductGroup as ProductGroupModel
from products.infrastructure.repositories.django_product_repository import (
    DjangoProductGroupRepository,
    DjangoProductRepository,
)

logger = logging.getLogger(__name__)
User = get_user_model()

TEST_FEATURES = ("export", "reports")
TEST_RELEASES = ("1.0.0", "1.1.0")


class Command(BaseCommand):
    """Command to create test data."""

    help = "Create test data (superuser, product group, product, license)"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--skip-superuser",
            action="store_true",
            help="Skip creating superuser",
        )
        parser.add_argument(
            "--skip-license",
            action="store_true",
            help="Skip creating test license",
        )
        parser.add_argument(
            "--group-name",
            type=str,
            default="Test Suite",
            help="Product group name (default: Test Suite)",
        )
        parser.add_argument(
            "--group-prefix",
            type=str,
            default="TEST",
            help="License key prefix inherited by the group's products (default: TEST)",
        )
        parser.add_argument(
            "--product-name",
            type=str,
            default="Test Product",
            help="Product name (default: Test Product)",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        if not options["skip_superuser"]:
            self.create_superuser()

        group, product = self.create_catalog(options)

        license = None
        if not options["skip_license"]:
            license = asyncio.run(self.create_test_license(product))

        self.print_summary(group, product, license)

    def create_superuser(self):
        """Create a superuser if it doesn't exist."""
        username = "admin"
        password = "admin"

        if User.objects.filter(username=username).exists():
            self.stdout.write(self.style.WARNING(f"Superuser '{username}' already exists"))
            return

        User.objects.create_superuser(username=username, email="admin@example.com", password=password)
        self.stdout.write(self.style.SUCCESS(f"Created superuser: {username} / {password}"))

    def create_catalog(self, options):
        """Create the product group, product, features and releases."""
        # pylint: disable=no-member
        group_model = ProductGroupModel.objects.filter(name=options["group_name"]).first()
        if group_model:
            self.stdout.write(
                self.style.WARNING(f"Product group '{options['group_name']}' already exists")
            )
            group = asyncio.run(DjangoProductGroupRepository().find_by_id(group_model.id))
        else:
            group = ProductGroup.create(
                name=options["group_name"],
                license_prefix=options["group_prefix"],
                license_charset="A-Z,0-9",
                license_length=16,
            )
            group = asyncio.run(DjangoProductGroupRepository().save(group))
            self.stdout.write(self.style.SUCCESS(f"Created product group: {group.name}"))

        product_model = ProductModel.objects.filter(
            name=options["product_name"], product_group_id=group.id
        ).first()
        if product_model:
            self.stdout.write(
                self.style.WARNING(f"Product '{options['product_name']}' already exists")
            )
            product = asyncio.run(DjangoProductRepository().find_by_id(product_model.id))
        else:
            product = Product.create(
                name=options["product_name"],
                product_group_id=group.id,
                auto_allowed_ip=True,
                auto_allowed_ip_limit=3,
            )
            product = asyncio.run(DjangoProductRepository().save(product))
            self.stdout.write(self.style.SUCCESS(f"Created product: {product.name}"))

        for code in TEST_FEATURES:
            Feature.objects.get_or_create(code=code, product_id=product.id, defaults={"name": code})
        for version in TEST_RELEASES:
            Release.objects.get_or_create(version=version, product_group_id=group.id)
        return group, product

    async def create_test_license(self, product: Product):
        """Generate a one-year license for the product."""
        handler = GenerateLicenseHandler(
            product_repository=DjangoProductRepository(),
            product_group_repository=DjangoProductGroupRepository(),
            license_repository=DjangoLicenseRepository(),
            audit_log=CeleryAuditLog(),
            defaults=get_license_defaults(),
        )
        license = await handler.handle(
            GenerateLicenseCommand(
                product_id=product.id,
                duration="1y",
                feature_codes=list(TEST_FEATURES),
                release_versions=list(TEST_RELEASES),
                owner_id="test-owner",
            )
        )
        self.stdout.write(self.style.SUCCESS(f"Created license: {license.key}"))
        return license

    def print_summary(self, group, product, license=None):
        """Print summary of created test data."""
        self.stdout.write(self.style.SUCCESS("\n" + "=" * 60))
        self.stdout.write(self.style.SUCCESS("Test Data Summary"))
        self.stdout.write(self.style.SUCCESS("=" * 60))

        self.stdout.write("\nSuperuser:")
        self.stdout.write("   Username: admin")
        self.stdout.write("   Password: admin")
        self.stdout.write("   URL: http://localhost:8000/admin/")

        self.stdout.write("\nProduct group:")
        self.stdout.write(f"   Name: {group.name}")
        self.stdout.write(f"   Prefix: {group.license_prefix}")
        self.stdout.write(f"   ID: {group.id}")

        self.stdout.write("\nProduct:")
        self.stdout.write(f"   Name: {product.name}")
        self.stdout.write(f"   ID: {product.id}")

        if license:
            self.stdout.write("\nLicense:")
            self.stdout.write(f"   Key: {license.key}")
            self.stdout.write(f"   Expires: {license.expires_at}")

            self.stdout.write("\nExample check request:")
            self.stdout.write("   curl http://localhost:8000/api/v1/check?version=1.0.0 \\")
            self.stdout.write(f'     -H "X-License-Key: {license.key}"')

        if not getattr(settings, "ADMIN_SECRET", ""):
            self.stdout.write(
                self.style.WARNING("\nADMIN_SECRET is not set; the admin API will reject requests.")
            )

        self.stdout.write(self.style.SUCCESS("\n" + "=" * 60 + "\n"))
