"""
Django management command to mark licenses past their expiry as expired.

Validation compares expires_at on every check, so this only keeps the
stored status in line for listings and the admin site. Run it
periodically (e.g., via cron or scheduled task).
"""

import asyncio
import logging

from django.core.management.base import BaseCommand
from django.utils import timezone

from licenses.infrastructure.models import License as LicenseModel
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to mark expired licenses."""

    help = "Mark active licenses whose expiry has passed as expired"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Dry run mode - don't actually update licenses",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        repository = DjangoLicenseRepository()

        # pylint: disable=no-member
        queryset = LicenseModel.objects.filter(
            status="active", expires_at__lt=timezone.now()
        ).prefetch_related("features", "releases")

        count = queryset.count()
        self.stdout.write(f"Found {count} expired license(s)")

        if options["dry_run"]:
            self.stdout.write(self.style.WARNING("DRY RUN - No changes will be made"))
            for license in queryset[:10]:
                self.stdout.write(f"  - License {license.key} expired at {license.expires_at}")
            return

        # Convert to entities before entering the event loop
        # pylint: disable=protected-access
        expired = [repository._to_domain(model) for model in queryset]
        if not expired:
            self.stdout.write(self.style.SUCCESS("No expired licenses to update"))
            return

        async def mark_expired():
            updated = 0
            for license in expired:
                try:
                    await repository.update(license.mark_expired())
                    updated += 1
                    logger.info("Marked license %s as expired", license.id)
                except Exception as e:  # pylint: disable=broad-exception-caught
                    logger.error(
                        "Error marking license %s as expired: %s", license.id, e, exc_info=True
                    )
            return updated

        updated = asyncio.run(mark_expired())
        self.stdout.write(self.style.SUCCESS(f"Successfully marked {updated} license(s) as expired"))
