"""
Typed views over Django settings.

The domain layer never reads django.conf.settings directly; it receives
these configuration objects instead.
"""
from django.conf import settings

from core.domain.value_objects import LicenseDefaults, RateLimitConfig, SigningConfig


def get_license_defaults() -> LicenseDefaults:
    """Build LicenseDefaults from the LICENSE_DEFAULTS setting."""
    values = getattr(settings, "LICENSE_DEFAULTS", {})
    return LicenseDefaults(
        prefix=values.get("prefix", "LICENSE"),
        separator=values.get("separator") or "-",
        charset=values.get("charset", ""),
        length=int(values.get("length") or 12),
    )


def get_rate_limit_config(pool: str) -> RateLimitConfig:
    """
    Build the RateLimitConfig of a limiter pool.

    Args:
        pool: "admin" or "check"

    Returns:
        RateLimitConfig read from RATE_LIMIT_ADMIN or RATE_LIMIT_CHECK
    """
    values = getattr(settings, f"RATE_LIMIT_{pool.upper()}", {})
    return RateLimitConfig(
        requests_per_second=float(values.get("requests_per_second", 5)),
        burst=int(values.get("burst", 10)),
        enabled=bool(values.get("enabled", True)),
        cache_size=int(values.get("cache_size", 5000)),
        cache_ttl=int(values.get("cache_ttl", 3600)),
    )


def get_signing_config() -> SigningConfig:
    """Build SigningConfig from the RESPONSE_SIGNING_* settings."""
    return SigningConfig(
        private_key=getattr(settings, "RESPONSE_SIGNING_PRIVATE_KEY", "") or "",
        public_key=getattr(settings, "RESPONSE_SIGNING_PUBLIC_KEY", "") or "",
        issuer=getattr(settings, "LICENSE_TOKEN_ISSUER", "") or "license-key-service",
    )
