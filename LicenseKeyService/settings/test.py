"""
Test settings for LicenseKeyService.
"""

from .base import *  # noqa: F403, F401

DEBUG = False

# Use in-memory SQLite for faster local tests
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# Use in-memory caches for tests
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    },
    "rate_limit_admin": rate_limit_cache("admin", RATE_LIMIT_ADMIN, "locmem"),  # noqa: F405
    "rate_limit_check": rate_limit_cache("check", RATE_LIMIT_CHECK, "locmem"),  # noqa: F405
}

# Password hashers for faster tests
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

# Audit tasks run inline against the test database
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = False
CELERY_BROKER_URL = "memory://"

ADMIN_SECRET = "test-admin-secret"

# Rate limiting is exercised explicitly in its own tests
RATE_LIMIT_ADMIN = {**RATE_LIMIT_ADMIN, "enabled": False}  # noqa: F405
RATE_LIMIT_CHECK = {**RATE_LIMIT_CHECK, "enabled": False}  # noqa: F405

RESPONSE_SIGNING_PRIVATE_KEY = ""
RESPONSE_SIGNING_PUBLIC_KEY = ""

# Disable logging during tests
LOGGING_CONFIG = None
