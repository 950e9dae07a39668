"""
Django management command to verify a signed check response token offline.
"""

import json

import jwt
from django.core.management.base import BaseCommand, CommandError

from core.config import get_signing_config
from core.domain.exceptions import SigningUnavailableError
from licenses.infrastructure.token_signer import verify_license_token


class Command(BaseCommand):
    """Command to verify a license token with the configured public key."""

    help = "Verify a license token and print its claims"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument("token", type=str, help="Token from a check response")
        parser.add_argument(
            "--public-key",
            type=str,
            default=None,
            help="Base64 Ed25519 public key (default: RESPONSE_SIGNING_PUBLIC_KEY)",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        config = get_signing_config()
        public_key = options["public_key"] or config.public_key
        try:
            claims = verify_license_token(options["token"], public_key, config.issuer)
        except SigningUnavailableError as e:
            raise CommandError(e.message) from e
        except jwt.InvalidTokenError as e:
            raise CommandError(f"Invalid token: {e}") from e

        self.stdout.write(self.style.SUCCESS("Token signature is valid"))
        self.stdout.write(json.dumps(claims, indent=2, sort_keys=True))
