"""
License administration handlers.

Handlers for update, revoke, and purge license commands.
"""
import logging
from datetime import datetime, timezone

from core.domain.exceptions import ConflictingExpirationError, LicenseNotFoundError
from core.domain.value_objects import AdminAction
from licenses.application.commands.purge_license import PurgeLicenseCommand
from licenses.application.commands.revoke_license import RevokeLicenseCommand
from licenses.application.commands.update_license import UpdateLicenseCommand
from licenses.application.dto.license_dto import LicenseDTO
from licenses.domain.duration import apply_duration
from licenses.domain.services import validate_allow_lists
from licenses.ports.audit_log import AdminLogEntry, AuditLogPort
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)

# Command field -> License field
_UPDATABLE_FIELDS = {
    "type": "type",
    "status": "status",
    "owner_id": "owner_id",
    "allowed_ips": "allowed_ips",
    "allowed_networks": "allowed_networks",
    "feature_codes": "features",
    "release_versions": "releases",
    "auto_allowed_ip": "auto_allowed_ip",
    "auto_allowed_ip_limit": "auto_allowed_ip_limit",
}


def _audit_value(value):
    if isinstance(value, datetime):
        return value.isoformat()
    if hasattr(value, "value"):
        return value.value
    return value


class UpdateLicenseHandler:
    """Handler for UpdateLicenseCommand."""

    def __init__(self, license_repository: LicenseRepository, audit_log: AuditLogPort):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.audit_log = audit_log

    async def handle(self, command: UpdateLicenseCommand) -> LicenseDTO:
        """
        Handle update license command.

        Args:
            command: UpdateLicenseCommand

        Returns:
            LicenseDTO of the updated license

        Raises:
            LicenseNotFoundError: If license not found
            ConflictingExpirationError: If both expires_at and duration are given
            InvalidDurationError: If duration is malformed
            InvalidNetworkAddressError: If an allow-list entry is malformed
        """
        if command.expires_at and command.duration:
            raise ConflictingExpirationError()

        license = await self.license_repository.find_by_key(command.key)
        if not license:
            raise LicenseNotFoundError(f"License {command.key} not found")

        changes = {
            field: getattr(command, attr)
            for attr, field in _UPDATABLE_FIELDS.items()
            if getattr(command, attr) is not None
        }
        if command.expires_at:
            changes["expires_at"] = command.expires_at
        elif command.duration:
            changes["expires_at"] = apply_duration(datetime.now(timezone.utc), command.duration)

        validate_allow_lists(
            changes.get("allowed_ips", []), changes.get("allowed_networks", [])
        )

        updated = await self.license_repository.update(license.with_changes(**changes))
        logger.info("Updated license %s: %s", updated.id, sorted(changes))

        await self.audit_log.record_admin_action(
            AdminLogEntry(
                action=AdminAction.UPDATE_LICENSE,
                entity_id=str(updated.id),
                details={
                    "key": updated.key,
                    "changes": {field: _audit_value(value) for field, value in changes.items()},
                },
                ip_address=command.actor_ip,
                owner_id=updated.owner_id,
            )
        )
        return LicenseDTO.from_entity(updated)


class RevokeLicenseHandler:
    """Handler for RevokeLicenseCommand."""

    def __init__(self, license_repository: LicenseRepository, audit_log: AuditLogPort):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.audit_log = audit_log

    async def handle(self, command: RevokeLicenseCommand) -> LicenseDTO:
        """
        Handle revoke license command.

        Args:
            command: RevokeLicenseCommand

        Returns:
            LicenseDTO of the revoked license

        Raises:
            LicenseNotFoundError: If license not found
        """
        license = await self.license_repository.find_by_key(command.key)
        if not license:
            raise LicenseNotFoundError(f"License {command.key} not found")

        revoked = await self.license_repository.update(license.revoke())
        logger.info("Revoked license %s", revoked.id)

        await self.audit_log.record_admin_action(
            AdminLogEntry(
                action=AdminAction.REVOKE_LICENSE,
                entity_id=str(revoked.id),
                details={"key": revoked.key},
                ip_address=command.actor_ip,
                owner_id=revoked.owner_id,
            )
        )
        return LicenseDTO.from_entity(revoked)


class PurgeLicenseHandler:
    """Handler for PurgeLicenseCommand."""

    def __init__(self, license_repository: LicenseRepository, audit_log: AuditLogPort):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.audit_log = audit_log

    async def handle(self, command: PurgeLicenseCommand) -> None:
        """
        Handle purge license command.

        Args:
            command: PurgeLicenseCommand

        Raises:
            LicenseNotFoundError: If license not found
        """
        license = await self.license_repository.find_by_key(command.key)
        if not license or not await self.license_repository.delete(command.key):
            raise LicenseNotFoundError(f"License {command.key} not found")

        logger.info("Purged license %s", license.id)
        await self.audit_log.record_admin_action(
            AdminLogEntry(
                action=AdminAction.DELETE_LICENSE,
                entity_id=str(license.id),
                details={"key": license.key, "product_id": str(license.product_id)},
                ip_address=command.actor_ip,
                owner_id=license.owner_id,
            )
        )
