"""
Client IP resolution.
"""
from django.conf import settings
from django.http import HttpRequest


def get_client_ip(request: HttpRequest) -> str:
    """
    Return the caller's IP address.

    X-Forwarded-For is honoured only when the direct peer is listed in
    TRUSTED_PROXIES; the first address in the header is the client.

    Args:
        request: HTTP request

    Returns:
        IP address string (may be empty if the server did not provide one)
    """
    remote_addr = request.META.get("REMOTE_ADDR", "") or ""
    trusted = getattr(settings, "TRUSTED_PROXIES", [])
    if remote_addr in trusted:
        forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
        if forwarded:
            return forwarded.split(",")[0].strip()
    return remote_addr
