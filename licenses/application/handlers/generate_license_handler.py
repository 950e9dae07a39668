"""
GenerateLicenseHandler.

Handles the generate license command.
"""
import logging

from core.domain.exceptions import DuplicateLicenseKeyError, ProductNotFoundError
from core.domain.value_objects import AdminAction, LicenseDefaults
from core.metrics import licenses_generated_total
from licenses.application.commands.generate_license import GenerateLicenseCommand
from licenses.application.dto.license_dto import LicenseDTO
from licenses.domain.license import License
from licenses.domain.license_key import generate_license_key, parse_charset
from licenses.domain.services import (
    LicenseSettingsOverrides,
    LicenseSettingsResolver,
    validate_allow_lists,
)
from licenses.ports.audit_log import AdminLogEntry, AuditLogPort
from licenses.ports.license_repository import LicenseRepository
from products.ports.product_repository import ProductGroupRepository, ProductRepository

logger = logging.getLogger(__name__)

MAX_KEY_ATTEMPTS = 3


class GenerateLicenseHandler:
    """Handler for GenerateLicenseCommand."""

    def __init__(
        self,
        product_repository: ProductRepository,
        product_group_repository: ProductGroupRepository,
        license_repository: LicenseRepository,
        audit_log: AuditLogPort,
        defaults: LicenseDefaults,
    ):
        """Initialize handler with repositories and key defaults."""
        self.product_repository = product_repository
        self.product_group_repository = product_group_repository
        self.license_repository = license_repository
        self.audit_log = audit_log
        self.resolver = LicenseSettingsResolver(defaults)

    async def handle(self, command: GenerateLicenseCommand) -> LicenseDTO:
        """
        Handle generate license command.

        Args:
            command: GenerateLicenseCommand

        Returns:
            LicenseDTO of the persisted license

        Raises:
            ProductNotFoundError: If product not found
            ConflictingExpirationError: If both expires_at and duration are given
            InvalidDurationError: If duration is malformed
            InvalidCharsetRangeError: If the resolved charset has a backwards range
            InvalidNetworkAddressError: If an allow-list entry is malformed
            DuplicateLicenseKeyError: If every generated key collided
        """
        product = await self.product_repository.find_by_id(command.product_id)
        if not product:
            raise ProductNotFoundError(f"Product {command.product_id} not found")

        group = None
        if product.product_group_id:
            group = await self.product_group_repository.find_by_id(product.product_group_id)

        validate_allow_lists(command.allowed_ips, command.allowed_networks)
        expires_at = self.resolver.resolve_expiration(
            command.expires_at, command.duration, product
        )
        license_type = self.resolver.resolve_type(command.type, product)
        settings = self.resolver.resolve(
            product,
            group,
            LicenseSettingsOverrides(
                prefix=command.prefix,
                separator=command.separator,
                charset=command.charset,
                length=command.length,
                auto_allowed_ip=command.auto_allowed_ip,
                auto_allowed_ip_limit=command.auto_allowed_ip_limit,
            ),
        )
        alphabet = parse_charset(settings.charset)

        saved = None
        for attempt in range(1, MAX_KEY_ATTEMPTS + 1):
            license = License.create(
                key=generate_license_key(
                    settings.prefix, settings.length, settings.separator, alphabet
                ),
                product_id=product.id,
                license_type=license_type,
                owner_id=command.owner_id,
                allowed_ips=list(command.allowed_ips),
                allowed_networks=list(command.allowed_networks),
                auto_allowed_ip=settings.auto_allowed_ip,
                auto_allowed_ip_limit=settings.auto_allowed_ip_limit,
                expires_at=expires_at,
                features=list(command.feature_codes),
                releases=list(command.release_versions),
            )
            try:
                saved = await self.license_repository.create(license)
                break
            except DuplicateLicenseKeyError:
                logger.warning(
                    "Generated license key collided (attempt %s of %s)",
                    attempt,
                    MAX_KEY_ATTEMPTS,
                )
        if saved is None:
            raise DuplicateLicenseKeyError(
                f"Could not generate a unique license key after {MAX_KEY_ATTEMPTS} attempts"
            )

        licenses_generated_total.labels(license_type=saved.type.value).inc()
        logger.info("Generated license %s for product %s", saved.id, product.id)

        await self.audit_log.record_admin_action(
            AdminLogEntry(
                action=AdminAction.GENERATE_LICENSE,
                entity_id=str(saved.id),
                details={
                    "key": saved.key,
                    "product_id": str(product.id),
                    "type": saved.type.value,
                    "owner_id": saved.owner_id,
                },
                ip_address=command.actor_ip,
                owner_id=saved.owner_id,
            )
        )
        return LicenseDTO.from_entity(saved)
