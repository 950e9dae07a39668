"""
Rate limiting middleware.

Token bucket per client IP, with separate pools for the admin API
and the check endpoint.
"""

import math
from typing import Callable, Dict, Optional

from django.http import HttpRequest, HttpResponse, JsonResponse

from core.config import get_rate_limit_config
from core.infrastructure.client_ip import get_client_ip
from core.infrastructure.rate_limit import RateLimiterPool
from core.metrics import rate_limited_requests_total

# Path prefix -> pool name
ROUTE_POOLS = (
    ("/api/v1/admin/", "admin"),
    ("/api/v1/check", "check"),
)


class RateLimitMiddleware:
    """
    Rate limiting middleware per client IP.

    Pools are configured by RATE_LIMIT_ADMIN and RATE_LIMIT_CHECK and keep
    their buckets in the rate_limit_admin and rate_limit_check caches.
    Rejected requests never reach the view.
    """

    def __init__(self, get_response: Callable):
        """Initialize middleware and its limiter pools."""
        self.get_response = get_response
        self.pools: Dict[str, RateLimiterPool] = {
            name: RateLimiterPool(get_rate_limit_config(name), cache_alias=f"rate_limit_{name}")
            for _, name in ROUTE_POOLS
        }

    def _get_pool_name(self, path: str) -> Optional[str]:
        for prefix, name in ROUTE_POOLS:
            if path.startswith(prefix):
                return name
        return None

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """
        Process request with rate limiting.

        Args:
            request: HTTP request

        Returns:
            HTTP response, 429 when the client's bucket is empty
        """
        pool_name = self._get_pool_name(request.path)
        if pool_name is None:
            return self.get_response(request)

        pool = self.pools[pool_name]
        client_ip = get_client_ip(request)
        if pool.allow(client_ip):
            return self.get_response(request)

        rate_limited_requests_total.labels(pool=pool_name).inc()
        response = JsonResponse(
            {
                "error": {
                    "code": "RATE_LIMIT_EXCEEDED",
                    "message": "Rate limit exceeded. Please try again later.",
                }
            },
            status=429,
        )
        retry_after = pool.retry_after(client_ip)
        if retry_after is not None:
            response["Retry-After"] = str(max(1, math.ceil(retry_after)))
        response["X-RateLimit-Limit"] = str(pool.config.burst)
        return response
