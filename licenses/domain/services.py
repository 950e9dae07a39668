"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity: resolving the effective key-generation
settings for a product, and validating a license on a check request.
"""
import ipaddress
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

from core.domain.exceptions import ConflictingExpirationError, InvalidNetworkAddressError
from core.domain.value_objects import LicenseDefaults, LicenseType
from licenses.domain.duration import apply_duration
from licenses.domain.license import License
from products.domain.product import Product, ProductGroup

logger = logging.getLogger(__name__)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

REASON_REVOKED = "License is revoked"
REASON_EXPIRED = "License has expired"
REASON_NO_CLIENT_IP = "Unable to determine client IP for validation"
REASON_IP_NOT_ALLOWED = "IP address not allowed"


@dataclass(frozen=True)
class LicenseSettingsOverrides:
    """Per-request key-generation settings; empty values mean "inherit"."""

    prefix: str = ""
    separator: str = ""
    charset: str = ""
    length: int = 0
    auto_allowed_ip: Optional[bool] = None
    auto_allowed_ip_limit: Optional[int] = None


@dataclass(frozen=True)
class ResolvedLicenseSettings:
    """Effective key-generation settings, baked into the license at creation."""

    prefix: str
    separator: str
    charset: str
    length: int
    auto_allowed_ip: bool
    auto_allowed_ip_limit: int


class LicenseSettingsResolver:
    """
    Domain service resolving key-generation settings.

    Each field resolves independently: request override, then product,
    then product group, then the configured defaults.
    """

    def __init__(self, defaults: LicenseDefaults):
        self.defaults = defaults

    def resolve(
        self,
        product: Product,
        group: Optional[ProductGroup] = None,
        overrides: Optional[LicenseSettingsOverrides] = None,
    ) -> ResolvedLicenseSettings:
        """
        Resolve the effective settings for a new key.

        Args:
            product: Product the key is generated for
            group: The product's group, if any
            overrides: Settings supplied with the request

        Returns:
            ResolvedLicenseSettings
        """
        overrides = overrides or LicenseSettingsOverrides()
        auto_allowed_ip, auto_allowed_ip_limit = self._resolve_auto_allow(
            product, group, overrides
        )
        return ResolvedLicenseSettings(
            prefix=self._first_set(
                overrides.prefix,
                product.license_prefix,
                group.license_prefix if group else "",
                self.defaults.prefix,
            ),
            separator=self._resolve_separator(product, group, overrides),
            charset=self._first_set(
                overrides.charset,
                product.license_charset,
                group.license_charset if group else "",
                self.defaults.charset,
            ),
            length=self._first_set(
                overrides.length,
                product.license_length,
                group.license_length if group else 0,
                self.defaults.length,
            ),
            auto_allowed_ip=auto_allowed_ip,
            auto_allowed_ip_limit=auto_allowed_ip_limit,
        )

    @staticmethod
    def _first_set(*candidates):
        for candidate in candidates[:-1]:
            if candidate:
                return candidate
        return candidates[-1]

    def _resolve_separator(
        self,
        product: Product,
        group: Optional[ProductGroup],
        overrides: LicenseSettingsOverrides,
    ) -> str:
        if overrides.separator:
            return overrides.separator
        # A product separator equal to the default does not shadow the group's
        if product.license_separator and product.license_separator != self.defaults.separator:
            return product.license_separator
        if group and group.license_separator:
            return group.license_separator
        return self.defaults.separator

    @staticmethod
    def _resolve_auto_allow(
        product: Product,
        group: Optional[ProductGroup],
        overrides: LicenseSettingsOverrides,
    ) -> tuple[bool, int]:
        if overrides.auto_allowed_ip is not None:
            return overrides.auto_allowed_ip, overrides.auto_allowed_ip_limit or 0
        if product.auto_allowed_ip:
            return True, product.auto_allowed_ip_limit
        if group and group.auto_allowed_ip:
            return True, group.auto_allowed_ip_limit
        return False, 0

    @staticmethod
    def resolve_type(
        requested: Optional[LicenseType], product: Product
    ) -> LicenseType:
        """Request type, then the product's default type, then perpetual."""
        return requested or product.license_type or LicenseType.PERPETUAL

    @staticmethod
    def resolve_expiration(
        expires_at: Optional[datetime],
        duration: Optional[str],
        product: Product,
        now: Optional[datetime] = None,
    ) -> Optional[datetime]:
        """
        Resolve the expiry of a new key.

        Args:
            expires_at: Explicit expiry from the request
            duration: Duration string from the request (e.g. "30d")
            product: Product whose license_duration applies when neither is given
            now: Reference time (defaults to now)

        Returns:
            Expiry datetime, or None for keys that never expire

        Raises:
            ConflictingExpirationError: If both expires_at and duration are given
            InvalidDurationError: If a duration string is malformed
        """
        if expires_at and duration:
            raise ConflictingExpirationError()
        if expires_at:
            return expires_at
        now = now or datetime.now(timezone.utc)
        if duration:
            return apply_duration(now, duration)
        if product.license_duration:
            return apply_duration(now, product.license_duration)
        return None


def parse_client_ip(value: Optional[str]) -> Optional[IPAddress]:
    """
    Parse a caller IP, unwrapping IPv4-mapped IPv6 addresses.

    Returns:
        The parsed address, or None if value is not an IP address
    """
    if not value:
        return None
    try:
        address = ipaddress.ip_address(value.strip())
    except ValueError:
        return None
    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped:
        return address.ipv4_mapped
    return address


def _parse_allowed_ip(entry: str) -> Optional[IPAddress]:
    address = parse_client_ip(entry)
    if address is not None:
        return address
    # Entries stored in CIDR notation (e.g. 10.0.0.1/32) match their address part
    try:
        return parse_client_ip(str(ipaddress.ip_interface(entry.strip()).ip))
    except ValueError:
        logger.error("Skipping invalid allowed IP entry: %s", entry)
        return None


def _parse_allowed_network(entry: str):
    try:
        return ipaddress.ip_network(entry.strip(), strict=False)
    except ValueError:
        logger.error("Skipping invalid allowed network entry: %s", entry)
        return None


def validate_allow_lists(allowed_ips: list, allowed_networks: list) -> None:
    """
    Reject malformed allow-list entries before they are stored.

    Args:
        allowed_ips: Literal addresses (CIDR-suffixed addresses are accepted)
        allowed_networks: CIDR blocks

    Raises:
        InvalidNetworkAddressError: If an entry does not parse
    """
    for entry in allowed_ips:
        try:
            ipaddress.ip_interface(str(entry).strip())
        except ValueError as exc:
            raise InvalidNetworkAddressError(f"Invalid IP address: {entry}") from exc
    for entry in allowed_networks:
        try:
            ipaddress.ip_network(str(entry).strip(), strict=False)
        except ValueError as exc:
            raise InvalidNetworkAddressError(f"Invalid network: {entry}") from exc


class IPDecision(Enum):
    """Outcome of the IP step of validation."""

    ALLOWED = "allowed"
    ADMIT = "admit"
    DENIED = "denied"
    UNKNOWN_CLIENT = "unknown_client"


class IPAccessPolicy:
    """Domain service matching a caller IP against a license's allow-lists."""

    @staticmethod
    def is_listed(license: License, address: IPAddress) -> bool:
        """
        Check whether an address is allowed by the license's lists.

        Args:
            license: License entity
            address: Parsed caller address

        Returns:
            True if it equals an allowed IP or falls inside an allowed network
        """
        for entry in license.allowed_ips:
            if _parse_allowed_ip(entry) == address:
                return True
        for entry in license.allowed_networks:
            network = _parse_allowed_network(entry)
            if network is not None and address in network:
                return True
        return False

    @classmethod
    def evaluate(cls, license: License, client_ip: Optional[str]) -> IPDecision:
        """
        Decide the IP step for a caller.

        Args:
            license: License entity
            client_ip: Raw caller IP

        Returns:
            IPDecision; ADMIT means the caller is allowed once its IP is stored
        """
        if not license.restricts_ip:
            return IPDecision.ALLOWED
        address = parse_client_ip(client_ip)
        if address is None:
            return IPDecision.UNKNOWN_CLIENT
        if cls.is_listed(license, address):
            return IPDecision.ALLOWED
        if license.auto_allowed_ip and len(license.allowed_ips) < license.auto_allowed_ip_limit:
            return IPDecision.ADMIT
        return IPDecision.DENIED


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a license on a check request."""

    valid: bool
    reason: Optional[str] = None
    admitted_ip: Optional[str] = None


class LicenseValidator:
    """
    Domain service for license validation.

    Steps run in order and stop at the first failure: status, expiry,
    IP (with auto-allow admission), version, feature.
    """

    def __init__(self, license_repository):
        """
        Initialize validator.

        Args:
            license_repository: LicenseRepository used to admit new IPs
        """
        self.license_repository = license_repository

    @staticmethod
    def check_status(license: License) -> Optional[str]:
        """Return a failure reason if the license is revoked."""
        if license.is_revoked:
            return REASON_REVOKED
        return None

    @staticmethod
    def check_expiry(license: License, now: Optional[datetime] = None) -> Optional[str]:
        """Return a failure reason if the license has expired."""
        if license.is_expired(now):
            return REASON_EXPIRED
        return None

    @staticmethod
    def check_version(license: License, version: Optional[str]) -> Optional[str]:
        """Return a failure reason if the license does not cover version."""
        if not version or not license.releases:
            return None
        if version in license.releases:
            return None
        return f"License not valid for version {version}"

    @staticmethod
    def check_feature(license: License, feature: Optional[str]) -> Optional[str]:
        """Return a failure reason if feature is not enabled on the license."""
        if not feature or feature in license.features:
            return None
        return f"Feature not enabled: {feature}"

    async def check_ip(self, license: License, client_ip: Optional[str]) -> tuple[Optional[str], Optional[str]]:
        """
        Run the IP step, admitting the caller when auto-allow has room.

        Args:
            license: License entity
            client_ip: Raw caller IP

        Returns:
            Tuple of (failure_reason, admitted_ip)
        """
        decision = IPAccessPolicy.evaluate(license, client_ip)
        if decision == IPDecision.ALLOWED:
            return None, None
        if decision == IPDecision.UNKNOWN_CLIENT:
            return REASON_NO_CLIENT_IP, None
        if decision == IPDecision.DENIED:
            return REASON_IP_NOT_ALLOWED, None

        admitted_ip = str(parse_client_ip(client_ip))
        try:
            admitted = await self.license_repository.admit_ip(
                license.key, admitted_ip, license.auto_allowed_ip_limit
            )
        except Exception as exc:  # pylint: disable=broad-exception-caught
            # The caller stays allowed; the IP will be admitted on a later check
            logger.error(
                "Failed to admit IP %s for license %s: %s",
                admitted_ip,
                license.id,
                exc,
                exc_info=True,
            )
            return None, None

        if not admitted:
            # Another request took the last slot first
            return REASON_IP_NOT_ALLOWED, None
        logger.info("Auto-allowed IP %s for license %s", admitted_ip, license.id)
        return None, admitted_ip

    async def validate(
        self,
        license: License,
        client_ip: Optional[str],
        version: Optional[str] = None,
        feature: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ValidationResult:
        """
        Validate a license for a check request.

        Args:
            license: License entity
            client_ip: Raw caller IP
            version: Requested version, if any
            feature: Requested feature, if any
            now: Reference time (defaults to now)

        Returns:
            ValidationResult with the first failure reason, if any
        """
        reason = self.check_status(license) or self.check_expiry(license, now)
        if reason:
            return ValidationResult(valid=False, reason=reason)

        reason, admitted_ip = await self.check_ip(license, client_ip)
        if reason:
            return ValidationResult(valid=False, reason=reason)

        reason = self.check_version(license, version) or self.check_feature(license, feature)
        if reason:
            return ValidationResult(valid=False, reason=reason, admitted_ip=admitted_ip)
        return ValidationResult(valid=True, admitted_ip=admitted_ip)
