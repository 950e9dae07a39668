"""
License check API view.

This endpoint is called by licensed software to ask whether a key is
currently usable from the calling machine.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.check.serializers import CheckLicenseQuerySerializer, CheckLicenseResponseSerializer
from core.config import get_signing_config
from core.infrastructure.client_ip import get_client_ip
from licenses.application.handlers.check_license_handler import CheckLicenseHandler
from licenses.application.queries.check_license import CheckLicenseQuery
from licenses.infrastructure.audit_log import CeleryAuditLog
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

# Initialize repositories (in production, use DI container)
_license_repo = DjangoLicenseRepository()
_audit_log = CeleryAuditLog()


class CheckLicenseView(APIView):
    """View for checking a license key."""

    @extend_schema(
        operation_id="check_license",
        summary="Check License",
        description=(
            "Validate a license key for the calling IP address, optionally for a "
            "release version and a feature. An unusable license is reported with "
            "valid=false and a reason. When response signing is configured, the "
            "response carries an Ed25519-signed token for offline verification."
        ),
        tags=["Check API"],
        parameters=[
            OpenApiParameter(
                name="X-License-Key",
                type=str,
                location=OpenApiParameter.HEADER,
                required=True,
                description="License key to check",
            ),
            OpenApiParameter(
                name="version",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Release version the client runs",
            ),
            OpenApiParameter(
                name="feature",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Feature code the client wants to use",
            ),
        ],
        responses={
            200: CheckLicenseResponseSerializer,
            400: {"description": "License key header missing"},
            404: {"description": "License key not found"},
            429: {"description": "Rate limit exceeded"},
        },
    )
    def get(self, request: Request) -> Response:
        """Check a license key."""
        return async_to_sync(self._handle_check_license)(request)

    async def _handle_check_license(self, request: Request) -> Response:
        """Async handler for check license."""
        serializer = CheckLicenseQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        handler = CheckLicenseHandler(
            license_repository=_license_repo,
            audit_log=_audit_log,
            signing_config=get_signing_config(),
        )
        query = CheckLicenseQuery(
            license_key=request.headers.get("X-License-Key", "").strip() or None,
            client_ip=get_client_ip(request),
            user_agent=request.headers.get("User-Agent", ""),
            version=serializer.validated_data.get("version") or None,
            feature=serializer.validated_data.get("feature") or None,
        )
        result = await handler.handle(query)

        return Response(CheckLicenseResponseSerializer(result).data, status=status.HTTP_200_OK)
