"""
API exception handlers.

This module provides custom exception handling for REST API responses.
"""

import logging
from typing import Any, Dict

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    DomainException,
    DuplicateLicenseKeyError,
    LicenseNotFoundError,
    LogQueryTimeoutError,
    ProductGroupNotFoundError,
    ProductNotFoundError,
    RandomSourceError,
)
from core.metrics import errors_total
from core.middleware.metrics import normalize_endpoint

logger = logging.getLogger(__name__)

NOT_FOUND_ERRORS = (LicenseNotFoundError, ProductNotFoundError, ProductGroupNotFoundError)
INTERNAL_ERRORS = (RandomSourceError, DuplicateLicenseKeyError)


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    endpoint = _get_endpoint(context)

    if isinstance(exc, DomainException):
        return _handle_domain_exception(exc, endpoint)

    if isinstance(exc, ValidationError):
        errors_total.labels(error_type="validation_error", endpoint=endpoint).inc()
        return Response(
            {
                "error": {
                    "code": "VALIDATION_ERROR",
                    "message": "Invalid request",
                    "details": exc.detail,
                }
            },
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, APIException):
        response = exception_handler(exc, context)
        if response:
            code = (
                exc.default_code.upper().replace("-", "_")
                if hasattr(exc, "default_code")
                else "API_ERROR"
            )
            response.data = {
                "error": {"code": code, "message": response.data.get("detail", exc.default_detail)}
            }
            return response

    if isinstance(exc, Http404):
        return Response(
            {"error": {"code": "NOT_FOUND", "message": "Resource not found"}},
            status=status.HTTP_404_NOT_FOUND,
        )

    return _handle_unexpected_exception(exc, endpoint)


def _get_endpoint(context: Dict[str, Any]) -> str:
    """Extract a normalized endpoint label from request context."""
    request = context.get("request")
    if not request:
        return "unknown"
    return normalize_endpoint(request.path)


def _handle_domain_exception(exc: DomainException, endpoint: str) -> Response:
    """Handle domain-specific exceptions."""
    if isinstance(exc, NOT_FOUND_ERRORS):
        logger.info("Not found: %s - %s", exc.code, exc.message)
        return Response(
            {"error": {"code": exc.code, "message": exc.message}},
            status=status.HTTP_404_NOT_FOUND,
        )

    errors_total.labels(error_type=exc.code, endpoint=endpoint).inc()
    if isinstance(exc, INTERNAL_ERRORS):
        logger.error("Internal domain error: %s - %s", exc.code, exc.message)
        return Response(
            {"error": {"code": exc.code, "message": exc.message}},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, LogQueryTimeoutError):
        logger.error("Log query timed out on %s", endpoint)
        return Response(
            {"error": {"code": exc.code, "message": exc.message}},
            status=status.HTTP_504_GATEWAY_TIMEOUT,
        )

    logger.warning("Domain exception: %s - %s", exc.code, exc.message)
    return Response(
        {"error": {"code": exc.code, "message": exc.message}},
        status=status.HTTP_400_BAD_REQUEST,
    )


def _handle_unexpected_exception(exc: Exception, endpoint: str) -> Response:
    """Handle unexpected or untracked exceptions."""
    errors_total.labels(error_type="internal_error", endpoint=endpoint).inc()
    logger.error("Unexpected error: %s", exc, exc_info=True)
    return Response(
        {"error": {"code": "INTERNAL_ERROR", "message": "An internal error occurred"}},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
