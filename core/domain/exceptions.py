"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class LicenseException(DomainException):
    """Base exception for license-related errors."""

    pass


class LicenseNotFoundError(LicenseException):
    """Raised when a license is not found."""

    def __init__(self, message: str = "License not found"):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class LicenseKeyRequiredError(LicenseException):
    """Raised when a check request carries no license key."""

    def __init__(self, message: str = "X-License-Key header is required"):
        super().__init__(message, code="LICENSE_KEY_REQUIRED")


class DuplicateLicenseKeyError(LicenseException):
    """Raised by the store when a generated key already exists."""

    def __init__(self, message: str = "License key already exists"):
        super().__init__(message, code="DUPLICATE_LICENSE_KEY")


class InvalidCharsetRangeError(LicenseException):
    """Raised when a charset range runs backwards (e.g. z-a)."""

    def __init__(self, message: str = "Invalid charset range"):
        super().__init__(message, code="INVALID_CHARSET_RANGE")


class InvalidDurationError(LicenseException):
    """Raised when a duration string cannot be parsed."""

    def __init__(self, message: str = "Invalid duration"):
        super().__init__(message, code="INVALID_DURATION")


class ConflictingExpirationError(LicenseException):
    """Raised when both an explicit expiry and a duration are supplied."""

    def __init__(self, message: str = "Cannot specify both expires_at and duration"):
        super().__init__(message, code="CONFLICTING_EXPIRATION")


class InvalidNetworkAddressError(LicenseException):
    """Raised when an allow-list entry is not a valid IP address or network."""

    def __init__(self, message: str = "Invalid IP address or network"):
        super().__init__(message, code="INVALID_NETWORK_ADDRESS")


class RandomSourceError(LicenseException):
    """Raised when the secure random source is unavailable."""

    def __init__(self, message: str = "Secure random source unavailable"):
        super().__init__(message, code="RANDOM_SOURCE_UNAVAILABLE")


class SigningUnavailableError(LicenseException):
    """Raised when no usable signing key is configured."""

    def __init__(self, message: str = "Response signing is not configured"):
        super().__init__(message, code="SIGNING_UNAVAILABLE")


class LogQueryTimeoutError(LicenseException):
    """Raised when a log or statistics read misses its deadline."""

    def __init__(self, message: str = "Log query timed out"):
        super().__init__(message, code="LOG_QUERY_TIMEOUT")


class ProductException(DomainException):
    """Base exception for product-related errors."""

    pass


class ProductNotFoundError(ProductException):
    """Raised when a product is not found."""

    def __init__(self, message: str = "Product not found"):
        super().__init__(message, code="PRODUCT_NOT_FOUND")


class ProductGroupNotFoundError(ProductException):
    """Raised when a product group is not found."""

    def __init__(self, message: str = "Product group not found"):
        super().__init__(message, code="PRODUCT_GROUP_NOT_FOUND")

