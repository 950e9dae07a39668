"""
Admin secret authentication middleware.

This middleware protects the administrative API with a shared secret.
The check endpoint is public; it authenticates by license key.
"""

import logging
import secrets
from typing import Optional

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

from core.infrastructure.client_ip import get_client_ip

logger = logging.getLogger(__name__)

ADMIN_API_PREFIX = "/api/v1/admin/"


class AdminSecretAuthenticationMiddleware(MiddlewareMixin):
    """
    Middleware for admin secret authentication.

    Requests under /api/v1/admin/ must carry ADMIN_SECRET in the
    X-API-Key header or as a Bearer token; otherwise 401.
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and validate authentication.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 401 if authentication fails, None otherwise
        """
        if not request.path.startswith(ADMIN_API_PREFIX):
            return None

        provided = request.headers.get("X-API-Key") or ""
        if not provided:
            auth_header = request.headers.get("Authorization", "")
            if auth_header.startswith("Bearer "):
                provided = auth_header[len("Bearer "):]

        if not provided:
            return self._unauthorized("Missing admin secret. Provide X-API-Key header.")

        expected = getattr(settings, "ADMIN_SECRET", "")
        if not expected:
            logger.error("ADMIN_SECRET is not configured; rejecting admin request")
            return self._unauthorized("Admin API is not configured")

        if not secrets.compare_digest(provided.encode(), expected.encode()):
            logger.warning("Invalid admin secret from %s", get_client_ip(request))
            return self._unauthorized("Invalid admin secret")
        return None

    @staticmethod
    def _unauthorized(message: str) -> JsonResponse:
        return JsonResponse(
            {"error": {"code": "UNAUTHORIZED", "message": message}},
            status=401,
        )
