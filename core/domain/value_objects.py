"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from dataclasses import dataclass
from enum import Enum


class LicenseStatus(Enum):
    """License status value object."""

    ACTIVE = "active"
    REVOKED = "revoked"
    # Informational only; validity is decided by expires_at
    EXPIRED = "expired"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value


class LicenseType(Enum):
    """License type value object."""

    PERPETUAL = "perpetual"
    TIMED = "timed"
    TRIAL = "trial"

    def __str__(self) -> str:
        """Return type as string."""
        return self.value


class AdminAction(Enum):
    """Administrative actions recorded in the admin log."""

    GENERATE_LICENSE = "GENERATE_LICENSE"
    UPDATE_LICENSE = "UPDATE_LICENSE"
    REVOKE_LICENSE = "REVOKE_LICENSE"
    DELETE_LICENSE = "DELETE_LICENSE"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class LicenseDefaults:
    """
    Fallback key-generation settings.

    Used when neither the request, the product nor its group
    provide a value.
    """

    prefix: str = "LICENSE"
    separator: str = "-"
    charset: str = ""
    length: int = 12

    def __post_init__(self):
        """Validate defaults."""
        if self.length < 1:
            raise ValueError("Default key length must be at least 1")
        if not self.separator:
            raise ValueError("Default separator cannot be empty")


@dataclass(frozen=True)
class RateLimitConfig:
    """Configuration of one rate limiter pool."""

    requests_per_second: float = 5.0
    burst: int = 10
    enabled: bool = True
    cache_size: int = 5000
    cache_ttl: int = 3600

    def __post_init__(self):
        """Validate limiter configuration."""
        if self.enabled:
            if self.requests_per_second <= 0:
                raise ValueError("requests_per_second must be positive")
            if self.burst < 1:
                raise ValueError("burst must be at least 1")
            if self.cache_size < 1:
                raise ValueError("cache_size must be at least 1")


@dataclass(frozen=True)
class SigningConfig:
    """Key material and issuer for offline verification tokens."""

    private_key: str = ""
    public_key: str = ""
    issuer: str = "license-key-service"

    @property
    def enabled(self) -> bool:
        """Return True when a private key is configured."""
        return bool(self.private_key)
