"""
CheckLicenseHandler.

Handles license check queries from client software. Every query,
including ones for missing or unknown keys, produces exactly one
check log entry.
"""
import logging
from typing import Optional

from core.domain.exceptions import (
    LicenseKeyRequiredError,
    LicenseNotFoundError,
    SigningUnavailableError,
)
from core.domain.value_objects import SigningConfig
from core.metrics import auto_allowed_ips_total, license_checks_total, license_tokens_signed_total
from licenses.application.dto.license_dto import CheckLicenseResultDTO
from licenses.application.queries.check_license import CheckLicenseQuery
from licenses.domain.license import License
from licenses.domain.services import LicenseValidator, ValidationResult, parse_client_ip
from licenses.infrastructure.token_signer import LicenseTokenSigner
from licenses.ports.audit_log import AuditLogPort, LicenseCheckLogEntry
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class CheckLicenseHandler:
    """Handler for CheckLicenseQuery."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        audit_log: AuditLogPort,
        signing_config: Optional[SigningConfig] = None,
    ):
        """
        Initialize handler.

        Args:
            license_repository: LicenseRepository
            audit_log: Sink for check log entries
            signing_config: Key material for offline tokens; no tokens when absent
        """
        self.license_repository = license_repository
        self.audit_log = audit_log
        self.signing_config = signing_config or SigningConfig()
        self.validator = LicenseValidator(license_repository)

    async def handle(self, query: CheckLicenseQuery) -> CheckLicenseResultDTO:
        """
        Handle check license query.

        Args:
            query: CheckLicenseQuery

        Returns:
            CheckLicenseResultDTO; an invalid license is a result, not an error

        Raises:
            LicenseKeyRequiredError: If no key was supplied
            LicenseNotFoundError: If the key is unknown
        """
        request_payload = {"version": query.version, "feature": query.feature}

        if not query.license_key:
            license_checks_total.labels(result="missing_key").inc()
            error = LicenseKeyRequiredError()
            await self._record(query, request_payload, 400, {"error": error.message})
            raise error

        license = await self.license_repository.find_by_key(query.license_key)
        if not license:
            license_checks_total.labels(result="not_found").inc()
            error = LicenseNotFoundError()
            logger.info("License check for unknown key from %s", query.client_ip)
            await self._record(query, request_payload, 404, {"error": error.message})
            raise error

        result = await self.validator.validate(
            license, query.client_ip, version=query.version, feature=query.feature
        )
        if result.admitted_ip:
            auto_allowed_ips_total.inc()
        license_checks_total.labels(result="valid" if result.valid else "invalid").inc()
        logger.info(
            "License check for %s: valid=%s reason=%s",
            license.id,
            result.valid,
            result.reason,
        )

        response = CheckLicenseResultDTO(
            valid=result.valid,
            expires_at=license.expires_at,
            reason=result.reason,
            token=self._sign(license, result),
        )
        await self._record(
            query,
            request_payload,
            200,
            {
                "valid": response.valid,
                "reason": response.reason,
                "expires_at": response.expires_at.isoformat() if response.expires_at else None,
                "token_issued": response.token is not None,
            },
            license=license,
        )
        return response

    def _sign(self, license: License, result: ValidationResult) -> Optional[str]:
        if not self.signing_config.enabled:
            return None
        try:
            signer = LicenseTokenSigner(self.signing_config.private_key, self.signing_config.issuer)
            token = signer.sign(license.key, license.expires_at, result.valid, license.features)
        except SigningUnavailableError as exc:
            logger.error("Failed to sign license check response: %s", exc.message)
            return None
        license_tokens_signed_total.inc()
        return token

    @staticmethod
    def _loggable_ip(client_ip: Optional[str]) -> Optional[str]:
        address = parse_client_ip(client_ip)
        return str(address) if address is not None else None

    async def _record(
        self,
        query: CheckLicenseQuery,
        request_payload: dict,
        status_code: int,
        response_payload: dict,
        license: Optional[License] = None,
    ) -> None:
        await self.audit_log.record_check(
            LicenseCheckLogEntry(
                license_key=query.license_key or "",
                status_code=status_code,
                request_payload=request_payload,
                response_payload=response_payload,
                license_id=license.id if license else None,
                product_id=license.product_id if license else None,
                ip_address=self._loggable_ip(query.client_ip),
                user_agent=query.user_agent,
            )
        )
