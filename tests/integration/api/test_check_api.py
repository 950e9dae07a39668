"""
Integration tests for the license check endpoint.
"""

import uuid
from datetime import timedelta

import pytest
from asgiref.sync import async_to_sync
from django.test import override_settings
from django.utils import timezone

from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel
from licenses.infrastructure.models import LicenseCheckLog
from licenses.infrastructure.token_signer import generate_key_pair, verify_license_token
from products.infrastructure.models import Feature, Release

CHECK_URL = "/api/v1/check"


def _create_license(license_repository, product_id, **restrictions) -> License:
    license = License.create(
        key=f"CHK-{uuid.uuid4().hex[:12].upper()}", product_id=product_id, **restrictions
    )
    return async_to_sync(license_repository.create)(license)


def _check(client, key=None, remote_addr="127.0.0.1", **params):
    headers = {"REMOTE_ADDR": remote_addr}
    if key is not None:
        headers["HTTP_X_LICENSE_KEY"] = key
    return client.get(CHECK_URL, params, **headers)


@pytest.mark.django_db
@pytest.mark.integration
class TestCheckLicenseAPI:
    """Test suite for GET /api/v1/check."""

    def test_valid_license(self, api_client, db_license):
        """Test checking an unrestricted license."""
        response = _check(api_client, db_license.key)

        assert response.status_code == 200
        assert response.data["valid"] is True
        assert response.data["expires_at"] is None
        assert "reason" not in response.data
        assert "token" not in response.data

    def test_missing_header(self, api_client):
        """Test that a missing key header is a 400."""
        response = _check(api_client)

        assert response.status_code == 400
        assert response.data["error"]["code"] == "LICENSE_KEY_REQUIRED"
        assert LicenseCheckLog.objects.filter(status_code=400).count() == 1

    def test_blank_header(self, api_client):
        """Test that a whitespace-only key counts as missing."""
        response = _check(api_client, "   ")

        assert response.status_code == 400

    def test_unknown_key(self, api_client):
        """Test that an unknown key is a 404."""
        response = _check(api_client, "NO-SUCH-KEY")

        assert response.status_code == 404
        assert response.data["error"]["code"] == "LICENSE_NOT_FOUND"
        log = LicenseCheckLog.objects.get(license_key="NO-SUCH-KEY")
        assert log.status_code == 404
        assert log.license_id is None

    def test_revoked_license(self, api_client, license_repository, db_license):
        """Test that a revoked license is reported invalid with 200."""
        async_to_sync(license_repository.update)(db_license.revoke())

        response = _check(api_client, db_license.key)

        assert response.status_code == 200
        assert response.data["valid"] is False
        assert response.data["reason"] == "License is revoked"

    def test_expired_license(self, api_client, license_repository, db_product):
        """Test that an expired license is reported invalid."""
        license = _create_license(
            license_repository, db_product.id, expires_at=timezone.now() - timedelta(days=1)
        )

        response = _check(api_client, license.key)

        assert response.data["valid"] is False
        assert response.data["reason"] == "License has expired"
        assert response.data["expires_at"] is not None

    def test_ip_allow_list(self, api_client, license_repository, db_product):
        """Test literal IP and CIDR allow-lists."""
        license = _create_license(
            license_repository,
            db_product.id,
            allowed_ips=["198.51.100.7"],
            allowed_networks=["10.20.0.0/16"],
        )

        assert _check(api_client, license.key, remote_addr="198.51.100.7").data["valid"] is True
        assert _check(api_client, license.key, remote_addr="10.20.5.1").data["valid"] is True

        denied = _check(api_client, license.key, remote_addr="192.0.2.1")
        assert denied.data["valid"] is False
        assert denied.data["reason"] == "IP address not allowed"

    def test_auto_allow_admits_until_limit(self, api_client, license_repository, db_product):
        """Test that callers are admitted up to the auto-allow limit."""
        license = _create_license(
            license_repository, db_product.id, auto_allowed_ip=True, auto_allowed_ip_limit=1
        )

        first = _check(api_client, license.key, remote_addr="203.0.113.5")
        again = _check(api_client, license.key, remote_addr="203.0.113.5")
        other = _check(api_client, license.key, remote_addr="203.0.113.6")

        assert first.data["valid"] is True
        assert again.data["valid"] is True
        assert other.data["valid"] is False
        assert other.data["reason"] == "IP address not allowed"
        assert LicenseModel.objects.get(key=license.key).allowed_ips == ["203.0.113.5"]

    def test_version_and_feature(self, api_client, license_repository, db_product):
        """Test release and feature entitlements linked from the catalog."""
        Feature.objects.create(code="export", product_id=db_product.id)
        Release.objects.create(version="1.0.0", product_id=db_product.id)
        license = _create_license(
            license_repository, db_product.id, features=["export"], releases=["1.0.0"]
        )

        ok = _check(api_client, license.key, version="1.0.0", feature="export")
        bad_version = _check(api_client, license.key, version="2.0.0")
        bad_feature = _check(api_client, license.key, feature="import")

        assert ok.data["valid"] is True
        assert bad_version.data["reason"] == "License not valid for version 2.0.0"
        assert bad_feature.data["reason"] == "Feature not enabled: import"

    def test_check_is_logged(self, api_client, db_license):
        """Test that a check writes one log record with the outcome."""
        _check(api_client, db_license.key, remote_addr="192.0.2.44", feature="x")

        log = LicenseCheckLog.objects.get(license_key=db_license.key)
        assert log.status_code == 200
        assert log.license_id == db_license.id
        assert log.product_id == db_license.product_id
        assert log.ip_address == "192.0.2.44"
        assert log.request_payload == {"version": None, "feature": "x"}
        assert log.response_payload["valid"] is False
        assert log.response_payload["token_issued"] is False

    def test_long_version_is_checked_and_logged(self, api_client, license_repository, db_product):
        """Test that an oversized version is an ordinary mismatch, not a 400."""
        Release.objects.create(version="1.0.0", product_id=db_product.id)
        license = _create_license(license_repository, db_product.id, releases=["1.0.0"])
        version = "9." * 60 + "9"

        response = _check(api_client, license.key, version=version)

        assert response.status_code == 200
        assert response.data["valid"] is False
        assert response.data["reason"] == f"License not valid for version {version}"
        log = LicenseCheckLog.objects.get(license_key=license.key)
        assert log.status_code == 200
        assert log.request_payload["version"] == version

    def test_signed_token(self, api_client, db_license):
        """Test that a configured signing key adds a verifiable token."""
        keys = generate_key_pair()

        with override_settings(
            RESPONSE_SIGNING_PRIVATE_KEY=keys["private_key"],
            RESPONSE_SIGNING_PUBLIC_KEY=keys["public_key"],
        ):
            response = _check(api_client, db_license.key)

        claims = verify_license_token(response.data["token"], keys["public_key"])
        assert claims["sub"] == db_license.key
        assert claims["valid"] is True
        assert claims["iss"] == "license-key-service"
        assert "exp" not in claims
