"""
Django management command to generate an Ed25519 key pair for signed
check responses.
"""

from django.core.management.base import BaseCommand

from licenses.infrastructure.token_signer import generate_key_pair


class Command(BaseCommand):
    """Command to print a fresh response signing key pair."""

    help = "Generate a base64 Ed25519 key pair for RESPONSE_SIGNING_PRIVATE_KEY/PUBLIC_KEY"

    def handle(self, *args, **options):
        """Execute the command."""
        pair = generate_key_pair()
        self.stdout.write(f"RESPONSE_SIGNING_PRIVATE_KEY={pair['private_key']}")
        self.stdout.write(f"RESPONSE_SIGNING_PUBLIC_KEY={pair['public_key']}")
        self.stdout.write(
            self.style.WARNING("Keep the private key secret; distribute only the public key.")
        )
