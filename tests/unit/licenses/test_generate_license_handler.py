"""
Unit tests for GenerateLicenseHandler.
"""
import re
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from core.domain.exceptions import (
    ConflictingExpirationError,
    DuplicateLicenseKeyError,
    InvalidCharsetRangeError,
    InvalidDurationError,
    InvalidNetworkAddressError,
    ProductNotFoundError,
)
from core.domain.value_objects import AdminAction, LicenseType
from licenses.application.commands.generate_license import GenerateLicenseCommand
from licenses.application.handlers.generate_license_handler import (
    MAX_KEY_ATTEMPTS,
    GenerateLicenseHandler,
)
from products.domain.product import Product


@pytest.fixture
def handler(
    memory_product_repository,
    memory_product_group_repository,
    memory_license_repository,
    audit_log,
    license_defaults,
):
    return GenerateLicenseHandler(
        product_repository=memory_product_repository,
        product_group_repository=memory_product_group_repository,
        license_repository=memory_license_repository,
        audit_log=audit_log,
        defaults=license_defaults,
    )


@pytest.mark.asyncio
class TestGenerateLicenseHandler:
    """Tests for GenerateLicenseHandler."""

    async def test_defaults_only(self, handler, memory_product_repository, audit_log):
        """Test a key for a product without group or overrides."""
        product = await memory_product_repository.save(Product.create(name="Solo"))

        result = await handler.handle(GenerateLicenseCommand(product_id=product.id))

        assert re.fullmatch(r"LICENSE-[A-Za-z0-9]{12}", result.key)
        assert result.type == "perpetual"
        assert result.status == "active"
        assert result.expires_at is None
        assert result.auto_allowed_ip is False
        assert [e.action for e in audit_log.admin_actions] == [AdminAction.GENERATE_LICENSE]
        assert audit_log.admin_actions[0].entity_id == str(result.id)

    async def test_inherits_group_format(self, handler, memory_product_repository, sample_group):
        """Test that the group's prefix, separator, charset and length apply."""
        product = await memory_product_repository.save(
            Product.create(name="Writer", product_group_id=sample_group.id)
        )
        await handler.product_group_repository.save(sample_group)

        result = await handler.handle(GenerateLicenseCommand(product_id=product.id))

        assert re.fullmatch(r"SUITE_[A-Z]{8}", result.key)

    async def test_request_overrides(self, handler, memory_product_repository):
        """Test that request values win."""
        product = await memory_product_repository.save(
            Product.create(name="Writer", license_prefix="PROD", license_length=30)
        )

        result = await handler.handle(
            GenerateLicenseCommand(
                product_id=product.id,
                prefix="REQ",
                separator=":",
                charset="0-9",
                length=6,
            )
        )

        assert re.fullmatch(r"REQ:[0-9]{6}", result.key)

    async def test_restrictions_are_stored(self, handler, memory_product_repository):
        """Test that lists, owner and auto-allow are persisted."""
        product = await memory_product_repository.save(Product.create(name="Writer"))

        result = await handler.handle(
            GenerateLicenseCommand(
                product_id=product.id,
                type=LicenseType.TRIAL,
                duration="7d",
                allowed_ips=["10.0.0.1"],
                allowed_networks=["192.168.0.0/16"],
                feature_codes=["sso"],
                release_versions=["1.0.0"],
                owner_id="owner-1",
                auto_allowed_ip=True,
                auto_allowed_ip_limit=3,
            )
        )

        stored = await handler.license_repository.find_by_key(result.key)
        assert stored.type == LicenseType.TRIAL
        assert stored.allowed_ips == ["10.0.0.1"]
        assert stored.allowed_networks == ["192.168.0.0/16"]
        assert stored.features == ["sso"]
        assert stored.releases == ["1.0.0"]
        assert stored.owner_id == "owner-1"
        assert (stored.auto_allowed_ip, stored.auto_allowed_ip_limit) == (True, 3)
        remaining = stored.expires_at - datetime.now(timezone.utc)
        assert timedelta(days=6, hours=23) < remaining <= timedelta(days=7)

    async def test_product_type_and_duration_defaults(self, handler, memory_product_repository):
        """Test that the product's license_type and license_duration apply."""
        product = await memory_product_repository.save(
            Product.create(name="Trialware", license_type=LicenseType.TRIAL, license_duration="14d")
        )

        result = await handler.handle(GenerateLicenseCommand(product_id=product.id))

        assert result.type == "trial"
        assert result.expires_at is not None

    async def test_product_not_found(self, handler, audit_log):
        """Test generating for an unknown product."""
        with pytest.raises(ProductNotFoundError):
            await handler.handle(GenerateLicenseCommand(product_id=uuid.uuid4()))
        assert audit_log.admin_actions == []

    @pytest.mark.parametrize(
        "changes,error",
        [
            ({"expires_at": datetime(2030, 1, 1, tzinfo=timezone.utc), "duration": "30d"},
             ConflictingExpirationError),
            ({"duration": "30x"}, InvalidDurationError),
            ({"charset": "z-a"}, InvalidCharsetRangeError),
            ({"allowed_ips": ["999.1.1.1"]}, InvalidNetworkAddressError),
            ({"allowed_networks": ["10.0.0.0/99"]}, InvalidNetworkAddressError),
        ],
    )
    async def test_input_errors_persist_nothing(
        self, handler, memory_product_repository, memory_license_repository, changes, error
    ):
        """Test that input errors raise before anything is stored."""
        product = await memory_product_repository.save(Product.create(name="Writer"))

        with pytest.raises(error):
            await handler.handle(GenerateLicenseCommand(product_id=product.id, **changes))
        assert memory_license_repository.licenses == {}

    async def test_retries_key_collisions(self, handler, memory_product_repository, monkeypatch):
        """Test that a colliding key is regenerated."""
        product = await memory_product_repository.save(Product.create(name="Writer"))
        keys = iter(["LICENSE-dup", "LICENSE-dup", "LICENSE-fresh"])
        monkeypatch.setattr(
            "licenses.application.handlers.generate_license_handler.generate_license_key",
            lambda *args: next(keys),
        )

        first = await handler.handle(GenerateLicenseCommand(product_id=product.id))
        second = await handler.handle(GenerateLicenseCommand(product_id=product.id))

        assert first.key == "LICENSE-dup"
        assert second.key == "LICENSE-fresh"

    async def test_gives_up_after_max_attempts(
        self, handler, memory_product_repository, monkeypatch
    ):
        """Test DuplicateLicenseKeyError once every attempt collided."""
        product = await memory_product_repository.save(Product.create(name="Writer"))
        calls = []

        def same_key(*args):
            calls.append(args)
            return "LICENSE-dup"

        monkeypatch.setattr(
            "licenses.application.handlers.generate_license_handler.generate_license_key",
            same_key,
        )
        await handler.handle(GenerateLicenseCommand(product_id=product.id))
        calls.clear()

        with pytest.raises(DuplicateLicenseKeyError):
            await handler.handle(GenerateLicenseCommand(product_id=product.id))
        assert len(calls) == MAX_KEY_ATTEMPTS
