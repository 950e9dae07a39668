"""
Administrative API views.

These endpoints are used by operators to:
- Generate license keys
- Inspect, update, revoke and purge licenses
- Read the check and admin audit logs
- Read dashboard usage totals

Licenses are addressed by the X-License-Key header.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.admin.serializers import (
    AdminLogPageSerializer,
    CheckLogPageSerializer,
    DashboardStatsQuerySerializer,
    DashboardStatsSerializer,
    GenerateLicenseRequestSerializer,
    LicenseDTOSerializer,
    LicenseListResponseSerializer,
    ListAdminLogsQuerySerializer,
    ListCheckLogsQuerySerializer,
    ListLicensesQuerySerializer,
    MessageResponseSerializer,
    UpdateLicenseRequestSerializer,
)
from core.config import get_license_defaults
from core.domain.exceptions import LicenseKeyRequiredError
from core.domain.value_objects import LicenseStatus, LicenseType
from core.infrastructure.client_ip import get_client_ip
from licenses.application.commands.generate_license import GenerateLicenseCommand
from licenses.application.commands.purge_license import PurgeLicenseCommand
from licenses.application.commands.revoke_license import RevokeLicenseCommand
from licenses.application.commands.update_license import UpdateLicenseCommand
from licenses.application.handlers.dashboard_stats_handler import DashboardStatsHandler
from licenses.application.handlers.generate_license_handler import GenerateLicenseHandler
from licenses.application.handlers.get_license_handler import (
    GetLicenseHandler,
    ListLicensesHandler,
)
from licenses.application.handlers.license_admin_handlers import (
    PurgeLicenseHandler,
    RevokeLicenseHandler,
    UpdateLicenseHandler,
)
from licenses.application.handlers.list_logs_handler import (
    ListAdminLogsHandler,
    ListCheckLogsHandler,
)
from licenses.application.queries.dashboard_stats import (
    DEFAULT_STATS_WINDOW,
    DashboardStatsQuery,
)
from licenses.application.queries.get_license import GetLicenseQuery
from licenses.application.queries.list_licenses import ListLicensesQuery
from licenses.application.queries.list_logs import ListAdminLogsQuery, ListCheckLogsQuery
from licenses.infrastructure.audit_log import CeleryAuditLog, DjangoAuditLogReader
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from licenses.infrastructure.stats import DjangoStatsReader
from products.infrastructure.repositories.django_product_repository import (
    DjangoProductGroupRepository,
    DjangoProductRepository,
)

# Initialize repositories (in production, use DI container)
_license_repo = DjangoLicenseRepository()
_product_repo = DjangoProductRepository()
_product_group_repo = DjangoProductGroupRepository()
_audit_log = CeleryAuditLog()
_audit_log_reader = DjangoAuditLogReader()
_stats_reader = DjangoStatsReader()

LICENSE_KEY_HEADER = OpenApiParameter(
    name="X-License-Key",
    type=str,
    location=OpenApiParameter.HEADER,
    required=True,
    description="License key to operate on",
)


def _require_license_key(request: Request) -> str:
    """Return the X-License-Key header or raise LicenseKeyRequiredError."""
    key = request.headers.get("X-License-Key", "").strip()
    if not key:
        raise LicenseKeyRequiredError()
    return key


class LicenseKeysView(APIView):
    """View for generating and managing license keys."""

    @extend_schema(
        operation_id="get_licenses",
        summary="Get or List Licenses",
        description=(
            "With an X-License-Key header, return that license. Without it, return "
            "a page of licenses, optionally for one owner."
        ),
        tags=["Admin API"],
        parameters=[
            OpenApiParameter(
                name="X-License-Key",
                type=str,
                location=OpenApiParameter.HEADER,
                required=False,
                description="License key to fetch",
            ),
            ListLicensesQuerySerializer,
        ],
        responses={
            200: LicenseListResponseSerializer,
            404: {"description": "License not found"},
        },
    )
    def get(self, request: Request) -> Response:
        """Get one license, or list licenses."""
        if request.headers.get("X-License-Key", "").strip():
            return async_to_sync(self._handle_get_license)(request)
        return async_to_sync(self._handle_list_licenses)(request)

    async def _handle_get_license(self, request: Request) -> Response:
        """Async handler for get license."""
        handler = GetLicenseHandler(license_repository=_license_repo)
        result = await handler.handle(GetLicenseQuery(key=_require_license_key(request)))
        return Response(LicenseDTOSerializer(result).data, status=status.HTTP_200_OK)

    async def _handle_list_licenses(self, request: Request) -> Response:
        """Async handler for list licenses."""
        serializer = ListLicensesQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        handler = ListLicensesHandler(license_repository=_license_repo)
        query = ListLicensesQuery(
            page=serializer.validated_data["page"],
            limit=serializer.validated_data["limit"],
            owner_id=serializer.validated_data.get("owner_id") or None,
        )
        result = await handler.handle(query)
        return Response(LicenseListResponseSerializer(result).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="generate_license",
        summary="Generate License",
        description=(
            "Generate a license key for a product. Key format and auto-allow "
            "settings not given in the request are inherited from the product, "
            "then its product group, then the service defaults."
        ),
        tags=["Admin API"],
        request=GenerateLicenseRequestSerializer,
        responses={
            201: LicenseDTOSerializer,
            400: {"description": "Bad Request"},
            404: {"description": "Product not found"},
        },
    )
    def post(self, request: Request) -> Response:
        """Generate a license key."""
        return async_to_sync(self._handle_generate_license)(request)

    async def _handle_generate_license(self, request: Request) -> Response:
        """Async handler for generate license."""
        serializer = GenerateLicenseRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        handler = GenerateLicenseHandler(
            product_repository=_product_repo,
            product_group_repository=_product_group_repo,
            license_repository=_license_repo,
            audit_log=_audit_log,
            defaults=get_license_defaults(),
        )
        command = GenerateLicenseCommand(
            product_id=data["product_id"],
            type=LicenseType(data["type"]) if data.get("type") else None,
            expires_at=data.get("expires_at"),
            duration=data.get("duration") or None,
            prefix=data.get("prefix", ""),
            separator=data.get("separator", ""),
            charset=data.get("charset", ""),
            length=data.get("length") or 0,
            feature_codes=data["feature_codes"],
            release_versions=data["release_versions"],
            allowed_ips=data["allowed_ips"],
            allowed_networks=data["allowed_networks"],
            owner_id=data.get("owner_id"),
            auto_allowed_ip=data.get("auto_allowed_ip"),
            auto_allowed_ip_limit=data.get("auto_allowed_ip_limit"),
            actor_ip=get_client_ip(request) or None,
        )
        result = await handler.handle(command)
        return Response(LicenseDTOSerializer(result).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="update_license",
        summary="Update License",
        description="Partially update the license named by X-License-Key.",
        tags=["Admin API"],
        parameters=[LICENSE_KEY_HEADER],
        request=UpdateLicenseRequestSerializer,
        responses={
            200: LicenseDTOSerializer,
            400: {"description": "Bad Request"},
            404: {"description": "License not found"},
        },
    )
    def put(self, request: Request) -> Response:
        """Update a license."""
        return async_to_sync(self._handle_update_license)(request)

    async def _handle_update_license(self, request: Request) -> Response:
        """Async handler for update license."""
        key = _require_license_key(request)
        serializer = UpdateLicenseRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        handler = UpdateLicenseHandler(license_repository=_license_repo, audit_log=_audit_log)
        command = UpdateLicenseCommand(
            key=key,
            type=LicenseType(data["type"]) if data.get("type") else None,
            status=LicenseStatus(data["status"]) if data.get("status") else None,
            expires_at=data.get("expires_at"),
            duration=data.get("duration") or None,
            allowed_ips=data.get("allowed_ips"),
            allowed_networks=data.get("allowed_networks"),
            feature_codes=data.get("feature_codes"),
            release_versions=data.get("release_versions"),
            owner_id=data.get("owner_id"),
            auto_allowed_ip=data.get("auto_allowed_ip"),
            auto_allowed_ip_limit=data.get("auto_allowed_ip_limit"),
            actor_ip=get_client_ip(request) or None,
        )
        result = await handler.handle(command)
        return Response(LicenseDTOSerializer(result).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="revoke_license",
        summary="Revoke License",
        description="Revoke the license named by X-License-Key. Revoked licenses fail every check.",
        tags=["Admin API"],
        parameters=[LICENSE_KEY_HEADER],
        request=None,
        responses={
            200: MessageResponseSerializer,
            404: {"description": "License not found"},
        },
    )
    def delete(self, request: Request) -> Response:
        """Revoke a license."""
        return async_to_sync(self._handle_revoke_license)(request)

    async def _handle_revoke_license(self, request: Request) -> Response:
        """Async handler for revoke license."""
        handler = RevokeLicenseHandler(license_repository=_license_repo, audit_log=_audit_log)
        await handler.handle(
            RevokeLicenseCommand(
                key=_require_license_key(request), actor_ip=get_client_ip(request) or None
            )
        )
        return Response({"message": "License revoked"}, status=status.HTTP_200_OK)


class LicensePurgeView(APIView):
    """View for permanently deleting a license."""

    @extend_schema(
        operation_id="purge_license",
        summary="Purge License",
        description="Permanently delete the license named by X-License-Key.",
        tags=["Admin API"],
        parameters=[LICENSE_KEY_HEADER],
        request=None,
        responses={
            200: MessageResponseSerializer,
            404: {"description": "License not found"},
        },
    )
    def delete(self, request: Request) -> Response:
        """Purge a license."""
        return async_to_sync(self._handle_purge_license)(request)

    async def _handle_purge_license(self, request: Request) -> Response:
        """Async handler for purge license."""
        handler = PurgeLicenseHandler(license_repository=_license_repo, audit_log=_audit_log)
        await handler.handle(
            PurgeLicenseCommand(
                key=_require_license_key(request), actor_ip=get_client_ip(request) or None
            )
        )
        return Response({"message": "License deleted permanently"}, status=status.HTTP_200_OK)


class CheckLogsView(APIView):
    """View for listing license check logs."""

    @extend_schema(
        operation_id="list_check_logs",
        summary="List License Check Logs",
        tags=["Admin API"],
        parameters=[ListCheckLogsQuerySerializer],
        responses={200: CheckLogPageSerializer},
    )
    def get(self, request: Request) -> Response:
        """List license check logs."""
        return async_to_sync(self._handle_list_check_logs)(request)

    async def _handle_list_check_logs(self, request: Request) -> Response:
        """Async handler for list check logs."""
        serializer = ListCheckLogsQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        handler = ListCheckLogsHandler(audit_log_reader=_audit_log_reader)
        result = await handler.handle(
            ListCheckLogsQuery(
                page=data["page"],
                limit=data["limit"],
                license_key=data.get("license_key") or None,
                product_id=data.get("product_id"),
                product_group_id=data.get("product_group_id"),
                status_code=data.get("status_code"),
            )
        )
        return Response(CheckLogPageSerializer(result).data, status=status.HTTP_200_OK)


class AdminLogsView(APIView):
    """View for listing admin action logs."""

    @extend_schema(
        operation_id="list_admin_logs",
        summary="List Admin Action Logs",
        tags=["Admin API"],
        parameters=[ListAdminLogsQuerySerializer],
        responses={200: AdminLogPageSerializer},
    )
    def get(self, request: Request) -> Response:
        """List admin action logs."""
        return async_to_sync(self._handle_list_admin_logs)(request)

    async def _handle_list_admin_logs(self, request: Request) -> Response:
        """Async handler for list admin logs."""
        serializer = ListAdminLogsQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        handler = ListAdminLogsHandler(audit_log_reader=_audit_log_reader)
        result = await handler.handle(
            ListAdminLogsQuery(
                page=data["page"],
                limit=data["limit"],
                action=data.get("action"),
                owner_id=data.get("owner_id") or None,
            )
        )
        return Response(AdminLogPageSerializer(result).data, status=status.HTTP_200_OK)


class DashboardStatsView(APIView):
    """View for admin dashboard totals."""

    @extend_schema(
        operation_id="dashboard_stats",
        summary="Dashboard Statistics",
        description=(
            "Count products, licenses, license checks, failed checks and admin "
            "actions, optionally for one owner. Check and action totals cover the "
            "look-back duration (default 30d)."
        ),
        tags=["Admin API"],
        parameters=[DashboardStatsQuerySerializer],
        responses={200: DashboardStatsSerializer},
    )
    def get(self, request: Request) -> Response:
        """Get dashboard statistics."""
        return async_to_sync(self._handle_dashboard_stats)(request)

    async def _handle_dashboard_stats(self, request: Request) -> Response:
        """Async handler for dashboard statistics."""
        serializer = DashboardStatsQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        handler = DashboardStatsHandler(stats_reader=_stats_reader)
        result = await handler.handle(
            DashboardStatsQuery(
                owner_id=data.get("owner_id") or None,
                duration=data.get("duration") or DEFAULT_STATS_WINDOW,
            )
        )
        return Response(DashboardStatsSerializer(result).data, status=status.HTTP_200_OK)
