"""
Base Django settings for LicenseKeyService.

These settings are shared across all environments.
Environment-specific overrides are in dev.py, test.py, and prod.py
"""
import os
from pathlib import Path

from .logging import get_logging_config

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    "SECRET_KEY", "django-insecure-q8#n1v!l3k$7m@x2p-0r4t^w6y(9z)c5e+b&d*f%h_j=s"
)

ALLOWED_HOSTS = os.environ.get("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")

# Application definition
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Third party
    "rest_framework",
    "drf_spectacular",
    # Local apps
    "core",
    "products",
    "licenses",
    "api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # Custom middleware
    "core.middleware.response_signing.ResponseSigningMiddleware",
    "core.middleware.metrics.MetricsMiddleware",
    "core.middleware.rate_limit.RateLimitMiddleware",
    "core.middleware.auth.AdminSecretAuthenticationMiddleware",
]

ROOT_URLCONF = "LicenseKeyService.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "LicenseKeyService.wsgi.application"
ASGI_APPLICATION = "LicenseKeyService.asgi.application"

# Database
# https://docs.djangoproject.com/en/4.2/ref/settings/#databases
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.environ.get("DB_NAME", "license_keys"),
        "USER": os.environ.get("DB_USER", "postgres"),
        "PASSWORD": os.environ.get("DB_PASSWORD", "postgres"),
        "HOST": os.environ.get("DB_HOST", "localhost"),
        "PORT": os.environ.get("DB_PORT", "5432"),
        "OPTIONS": {
            "connect_timeout": 10,
        },
    }
}

# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {
        "NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.MinimumLengthValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.CommonPasswordValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.NumericPasswordValidator",
    },
]

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# REST Framework
REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "api.exceptions.custom_exception_handler",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

# drf-spectacular settings
SPECTACULAR_SETTINGS = {
    "TITLE": "License Key Service API",
    "DESCRIPTION": (
        "Issues and validates software license keys. "
        "Provides an administrative API for key management "
        "and a public check endpoint for client software."
    ),
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SCHEMA_PATH_PREFIX": "/api/v1",
    "TAGS": [
        {"name": "Admin API", "description": "License key administration"},
        {"name": "Check API", "description": "License key validation"},
        {"name": "Health", "description": "Health check endpoints"},
    ],
    "APPEND_COMPONENTS": {
        "securitySchemes": {
            "AdminSecret": {
                "type": "apiKey",
                "in": "header",
                "name": "X-API-Key",
                "description": "ADMIN_SECRET, required on /api/v1/admin/ endpoints.",
            }
        }
    },
}

# Redis Cache
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.redis.RedisCache",
        "LOCATION": os.environ.get("REDIS_URL", "redis://127.0.0.1:6379/1"),
        "OPTIONS": {
            "socket_connect_timeout": 5,
            "socket_timeout": 5,
        },
    }
}

# Celery (audit log writes)
CELERY_BROKER_URL = os.environ.get("CELERY_BROKER_URL", "redis://127.0.0.1:6379/0")
CELERY_TASK_IGNORE_RESULT = True
CELERY_TASK_SERIALIZER = "json"
CELERY_ACCEPT_CONTENT = ["json"]

# Administrative authentication
ADMIN_SECRET = os.environ.get("ADMIN_SECRET", "")

# Proxies whose X-Forwarded-For header is trusted for client IP resolution
TRUSTED_PROXIES = [
    proxy.strip()
    for proxy in os.environ.get("TRUSTED_PROXIES", "").split(",")
    if proxy.strip()
]


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _rate_limit_settings(prefix: str) -> dict:
    return {
        "requests_per_second": float(os.environ.get(f"{prefix}_RPS", "5")),
        "burst": int(os.environ.get(f"{prefix}_BURST", "10")),
        "enabled": _env_bool(f"{prefix}_ENABLED", True),
        "cache_size": int(os.environ.get(f"{prefix}_CACHE_SIZE", "5000")),
        "cache_ttl": int(os.environ.get(f"{prefix}_CACHE_TTL", "3600")),
    }


# Per-IP token buckets, one pool per route family
RATE_LIMIT_ADMIN = _rate_limit_settings("RATE_LIMIT_ADMIN")
RATE_LIMIT_CHECK = _rate_limit_settings("RATE_LIMIT_CHECK")


def rate_limit_cache(pool: str, limits: dict, backend: str = "redis") -> dict:
    """Cache alias holding the token buckets of one limiter pool."""
    if backend == "locmem":
        return {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": f"rate-limit-{pool}",
            "TIMEOUT": limits["cache_ttl"],
            "OPTIONS": {"MAX_ENTRIES": limits["cache_size"]},
        }
    # MAX_ENTRIES only bounds local backends; bound Redis with maxmemory-policy allkeys-lru
    return {
        "BACKEND": "django.core.cache.backends.redis.RedisCache",
        "LOCATION": os.environ.get(
            "RATE_LIMIT_REDIS_URL", os.environ.get("REDIS_URL", "redis://127.0.0.1:6379/1")
        ),
        "TIMEOUT": limits["cache_ttl"],
        "KEY_PREFIX": f"rate_limit_{pool}",
        "OPTIONS": {
            "socket_connect_timeout": 5,
            "socket_timeout": 5,
        },
    }


# "locmem" keeps buckets per process, for single-worker deployments
RATE_LIMIT_CACHE_BACKEND = os.environ.get("RATE_LIMIT_CACHE_BACKEND", "redis")
CACHES["rate_limit_admin"] = rate_limit_cache("admin", RATE_LIMIT_ADMIN, RATE_LIMIT_CACHE_BACKEND)
CACHES["rate_limit_check"] = rate_limit_cache("check", RATE_LIMIT_CHECK, RATE_LIMIT_CACHE_BACKEND)

# Offline verification tokens (base64 Ed25519 key material)
RESPONSE_SIGNING_PRIVATE_KEY = os.environ.get("RESPONSE_SIGNING_PRIVATE_KEY", "")
RESPONSE_SIGNING_PUBLIC_KEY = os.environ.get("RESPONSE_SIGNING_PUBLIC_KEY", "")
LICENSE_TOKEN_ISSUER = os.environ.get("LICENSE_TOKEN_ISSUER", "license-key-service")

# Fallbacks used when neither the request, the product nor its group set a value
LICENSE_DEFAULTS = {
    "prefix": os.environ.get("LICENSE_DEFAULT_PREFIX", "LICENSE"),
    "separator": os.environ.get("LICENSE_DEFAULT_SEPARATOR", "-"),
    "charset": os.environ.get("LICENSE_DEFAULT_CHARSET", ""),
    "length": int(os.environ.get("LICENSE_DEFAULT_LENGTH", "12")),
}

# Observability
LOGGING = get_logging_config(os.environ.get("ENVIRONMENT", "development"))
