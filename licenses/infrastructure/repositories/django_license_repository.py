"""
Django implementation of LicenseRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import logging
from typing import Iterable, List, Optional, Tuple

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction
from django.db.models import Q

from core.domain.exceptions import DuplicateLicenseKeyError, LicenseNotFoundError
from core.domain.value_objects import LicenseStatus, LicenseType
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel
from licenses.ports.license_repository import LicenseRepository
from products.infrastructure.models import Feature, Product, Release

logger = logging.getLogger(__name__)


def _dedupe(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(values))


class DjangoLicenseRepository(LicenseRepository):
    """
    Django ORM implementation of LicenseRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Links feature/release codes visible to the license's product
    3. Implements the atomic auto-allow admission
    """

    def _to_domain(self, model: LicenseModel) -> License:
        """
        Convert Django model to domain entity.

        Args:
            model: Django License model

        Returns:
            License domain entity
        """
        return License(
            id=model.id,
            key=model.key,
            product_id=model.product_id,
            type=LicenseType(model.type),
            status=LicenseStatus(model.status),
            owner_id=model.owner_id,
            allowed_ips=list(model.allowed_ips or []),
            allowed_networks=list(model.allowed_networks or []),
            auto_allowed_ip=model.auto_allowed_ip,
            auto_allowed_ip_limit=model.auto_allowed_ip_limit,
            expires_at=model.expires_at,
            features=_dedupe(feature.code for feature in model.features.all()),
            releases=_dedupe(release.version for release in model.releases.all()),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _apply_fields(self, model: LicenseModel, license: License) -> None:
        model.owner_id = license.owner_id
        model.type = license.type.value
        model.status = license.status.value
        model.allowed_ips = list(license.allowed_ips)
        model.allowed_networks = list(license.allowed_networks)
        model.auto_allowed_ip = license.auto_allowed_ip
        model.auto_allowed_ip_limit = license.auto_allowed_ip_limit
        model.expires_at = license.expires_at

    def _link_entitlements(self, model: LicenseModel, license: License) -> None:
        """
        Link the feature codes and release versions visible to the product.

        Codes scoped to the product, its group, or global are accepted;
        anything else is dropped.
        """
        group_id = (
            Product.objects.filter(id=model.product_id)
            .values_list("product_group_id", flat=True)
            .first()
        )
        scope = Q(product_id=model.product_id) | Q(product__isnull=True, product_group__isnull=True)
        if group_id:
            scope |= Q(product_group_id=group_id)

        model.features.set(Feature.objects.filter(scope, code__in=license.features))
        model.releases.set(Release.objects.filter(scope, version__in=license.releases))

    @sync_to_async
    def create(self, license: License) -> License:
        """
        Persist a new license.

        Args:
            license: License entity to create

        Returns:
            Created license with the confirmed features and releases

        Raises:
            DuplicateLicenseKeyError: If the key already exists
        """
        model = LicenseModel(id=license.id, key=license.key, product_id=license.product_id)
        self._apply_fields(model, license)
        try:
            with transaction.atomic():
                model.save(force_insert=True)
                self._link_entitlements(model, license)
        except IntegrityError as exc:
            if LicenseModel.objects.filter(key=license.key).exists():
                raise DuplicateLicenseKeyError() from exc
            raise
        return self._to_domain(model)

    @sync_to_async
    def update(self, license: License) -> License:
        """
        Persist changes to an existing license.

        Args:
            license: License entity with updated fields

        Returns:
            Updated license

        Raises:
            LicenseNotFoundError: If no license has this key
        """
        with transaction.atomic():
            try:
                model = LicenseModel.objects.select_for_update().get(key=license.key)
            except LicenseModel.DoesNotExist as exc:
                raise LicenseNotFoundError() from exc
            self._apply_fields(model, license)
            model.save()
            self._link_entitlements(model, license)
        return self._to_domain(model)

    @sync_to_async
    def find_by_key(self, key: str) -> Optional[License]:
        """
        Find a license by its key.

        Args:
            key: License key string

        Returns:
            License entity or None if not found
        """
        try:
            return self._to_domain(LicenseModel.objects.get(key=key))
        except LicenseModel.DoesNotExist:
            return None

    @sync_to_async
    def delete(self, key: str) -> bool:
        """
        Delete a license.

        Args:
            key: License key string

        Returns:
            True if a license was deleted
        """
        deleted, _ = LicenseModel.objects.filter(key=key).delete()
        return deleted > 0

    @sync_to_async
    def admit_ip(self, key: str, ip: str, limit: int) -> bool:
        """
        Append ip to allowed_ips if the list holds fewer than limit entries.

        The row is locked for the length check and the append.

        Args:
            key: License key string
            ip: Normalized caller IP
            limit: Maximum number of allowed IPs

        Returns:
            True if the IP was appended or already present, False if full

        Raises:
            LicenseNotFoundError: If no license has this key
        """
        with transaction.atomic():
            try:
                model = LicenseModel.objects.select_for_update().get(key=key)
            except LicenseModel.DoesNotExist as exc:
                raise LicenseNotFoundError() from exc

            allowed_ips = list(model.allowed_ips or [])
            if ip in allowed_ips:
                return True
            if len(allowed_ips) >= limit:
                logger.info("Auto-allow limit %s reached for license %s", limit, model.id)
                return False

            model.allowed_ips = allowed_ips + [ip]
            model.save(update_fields=["allowed_ips", "updated_at"])
            return True

    @sync_to_async
    def list(
        self, owner_id: Optional[str] = None, limit: int = 100, offset: int = 0
    ) -> Tuple[List[License], int]:
        """
        List licenses, newest first.

        Args:
            owner_id: Optional owner filter
            limit: Page size
            offset: Number of licenses to skip

        Returns:
            Tuple of (licenses, total_count)
        """
        queryset = LicenseModel.objects.prefetch_related("features", "releases")
        if owner_id:
            queryset = queryset.filter(owner_id=owner_id)
        total = queryset.count()
        models = queryset.order_by("-created_at")[offset : offset + limit]
        return [self._to_domain(model) for model in models], total
