"""
Unit tests for CheckLicenseHandler.
"""
from datetime import datetime, timedelta, timezone

import pytest

from core.domain.exceptions import LicenseKeyRequiredError, LicenseNotFoundError
from core.domain.value_objects import SigningConfig
from licenses.application.handlers.check_license_handler import CheckLicenseHandler
from licenses.application.queries.check_license import CheckLicenseQuery
from licenses.infrastructure.token_signer import generate_key_pair, verify_license_token


@pytest.fixture
def handler(memory_license_repository, audit_log):
    return CheckLicenseHandler(license_repository=memory_license_repository, audit_log=audit_log)


@pytest.mark.asyncio
class TestCheckLicenseHandler:
    """Tests for CheckLicenseHandler."""

    async def test_valid_license(self, handler, memory_license_repository, sample_license, audit_log):
        """Test a valid check and its log entry."""
        await memory_license_repository.create(sample_license)

        result = await handler.handle(
            CheckLicenseQuery(
                license_key=sample_license.key,
                client_ip="203.0.113.5",
                user_agent="client/1.0",
                version="1.0.0",
            )
        )

        assert result.valid is True
        assert result.reason is None
        assert result.token is None
        assert len(audit_log.checks) == 1
        entry = audit_log.checks[0]
        assert entry.status_code == 200
        assert entry.license_id == sample_license.id
        assert entry.product_id == sample_license.product_id
        assert entry.ip_address == "203.0.113.5"
        assert entry.user_agent == "client/1.0"
        assert entry.request_payload == {"version": "1.0.0", "feature": None}
        assert entry.response_payload["valid"] is True

    async def test_invalid_license_is_a_result(
        self, handler, memory_license_repository, sample_license, audit_log
    ):
        """Test that an invalid license returns valid=false with status 200 logged."""
        expires_at = datetime.now(timezone.utc) - timedelta(days=1)
        license = await memory_license_repository.create(
            sample_license.with_changes(expires_at=expires_at)
        )

        result = await handler.handle(CheckLicenseQuery(license_key=license.key, client_ip=None))

        assert result.valid is False
        assert result.reason == "License has expired"
        assert result.expires_at == expires_at
        assert audit_log.checks[0].status_code == 200
        assert audit_log.checks[0].response_payload["reason"] == "License has expired"

    async def test_unknown_key(self, handler, audit_log):
        """Test that an unknown key raises and is logged with 404."""
        with pytest.raises(LicenseNotFoundError):
            await handler.handle(CheckLicenseQuery(license_key="NOPE", client_ip="10.0.0.1"))

        assert len(audit_log.checks) == 1
        assert audit_log.checks[0].status_code == 404
        assert audit_log.checks[0].license_key == "NOPE"
        assert audit_log.checks[0].license_id is None

    async def test_missing_key(self, handler, audit_log):
        """Test that a missing key raises and is logged with 400."""
        with pytest.raises(LicenseKeyRequiredError):
            await handler.handle(CheckLicenseQuery(license_key=None, client_ip="10.0.0.1"))
        assert audit_log.checks[0].status_code == 400

    async def test_unparseable_ip_is_not_logged_as_address(
        self, handler, memory_license_repository, sample_license, audit_log
    ):
        """Test that the log stores no address when the caller IP is garbage."""
        await memory_license_repository.create(sample_license)
        await handler.handle(CheckLicenseQuery(license_key=sample_license.key, client_ip="garbage"))
        assert audit_log.checks[0].ip_address is None

    async def test_signed_token(self, memory_license_repository, audit_log, sample_license):
        """Test that a token is attached when signing is configured."""
        pair = generate_key_pair()
        handler = CheckLicenseHandler(
            memory_license_repository,
            audit_log,
            SigningConfig(private_key=pair["private_key"], public_key=pair["public_key"]),
        )
        license = await memory_license_repository.create(
            sample_license.with_changes(features=["sso"])
        )

        result = await handler.handle(
            CheckLicenseQuery(license_key=license.key, client_ip="10.0.0.1", feature="other")
        )

        claims = verify_license_token(result.token, pair["public_key"])
        assert claims["sub"] == license.key
        assert claims["valid"] is False
        assert claims["features"] == ["sso"]
        assert audit_log.checks[0].response_payload["token_issued"] is True

    async def test_malformed_signing_key_omits_token(
        self, memory_license_repository, audit_log, sample_license
    ):
        """Test that a broken signing key degrades to no token."""
        handler = CheckLicenseHandler(
            memory_license_repository, audit_log, SigningConfig(private_key="not-a-key")
        )
        await memory_license_repository.create(sample_license)

        result = await handler.handle(
            CheckLicenseQuery(license_key=sample_license.key, client_ip="10.0.0.1")
        )

        assert result.valid is True
        assert result.token is None

    async def test_auto_allow_persists_ip(
        self, handler, memory_license_repository, sample_license
    ):
        """Test that the check admits a new IP through the repository."""
        license = await memory_license_repository.create(
            sample_license.with_changes(auto_allowed_ip=True, auto_allowed_ip_limit=1)
        )

        result = await handler.handle(CheckLicenseQuery(license_key=license.key, client_ip="10.1.1.1"))

        assert result.valid is True
        stored = await memory_license_repository.find_by_key(license.key)
        assert stored.allowed_ips == ["10.1.1.1"]
