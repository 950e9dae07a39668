"""
Response signing middleware.

When RESPONSE_SIGNING_PRIVATE_KEY is set, every buffered response gets an
Ed25519 signature over "<timestamp>.<body>" so clients can detect tampered
or replayed responses. The timestamp is RFC 3339 UTC with second precision.
"""

import base64
import functools
import logging
from datetime import datetime, timezone

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from django.http import HttpRequest, HttpResponse
from django.utils.deprecation import MiddlewareMixin

from core.config import get_signing_config
from core.domain.exceptions import SigningUnavailableError
from licenses.infrastructure.token_signer import load_private_key

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Clortho-Signature"
TIMESTAMP_HEADER = "X-Clortho-Timestamp"


def signature_payload(timestamp: str, body: bytes) -> bytes:
    """Bytes covered by the response signature."""
    return timestamp.encode("ascii") + b"." + body


@functools.lru_cache(maxsize=4)
def _signing_key(private_key_b64: str) -> Ed25519PrivateKey:
    return load_private_key(private_key_b64)


class ResponseSigningMiddleware(MiddlewareMixin):
    """
    Middleware adding X-Clortho-Signature and X-Clortho-Timestamp headers.

    Responses pass through unsigned when no key is configured, when the
    key is malformed, or when the response is streamed.
    """

    def process_response(self, request: HttpRequest, response: HttpResponse) -> HttpResponse:
        """
        Sign the response body.

        Args:
            request: HTTP request
            response: Rendered HTTP response

        Returns:
            The same response, with signature headers when signing is configured
        """
        private_key = get_signing_config().private_key
        if not private_key or response.streaming:
            return response

        try:
            key = _signing_key(private_key)
        except SigningUnavailableError as exc:
            logger.error("Invalid response signing key: %s", exc.message)
            return response

        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        signature = key.sign(signature_payload(timestamp, response.content))
        response[SIGNATURE_HEADER] = base64.b64encode(signature).decode("ascii")
        response[TIMESTAMP_HEADER] = timestamp
        return response
