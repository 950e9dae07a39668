"""
Per-client token bucket rate limiting.

Each client IP gets its own bucket. Bucket state lives in the Django
cache alias of its pool, so every worker process behind the same cache
sees the same buckets. Entries expire cache_ttl seconds after their last
update; the alias bounds how many clients are tracked (MAX_ENTRIES on
local backends, the server's eviction policy on Redis).

Updates are a plain get then set: two concurrent requests from one IP
on different workers may both spend the same token.
"""
import time
from typing import Callable, Optional, Tuple

from django.core.cache import BaseCache, caches

from core.domain.value_objects import RateLimitConfig

# (tokens, updated_at)
BucketState = Tuple[float, float]


class TokenBucket:
    """Token bucket refilling rate tokens per second up to capacity."""

    def __init__(
        self,
        rate: float,
        capacity: int,
        now: float,
        state: Optional[BucketState] = None,
    ):
        self.rate = rate
        self.capacity = capacity
        if state is None:
            self.tokens = float(capacity)
            self.updated_at = now
        else:
            self.tokens, self.updated_at = state

    @property
    def state(self) -> BucketState:
        return (self.tokens, self.updated_at)

    def allow(self, now: float) -> bool:
        """
        Take one token if available.

        Args:
            now: Wall clock timestamp in seconds

        Returns:
            True if the request is admitted
        """
        elapsed = max(0.0, now - self.updated_at)
        self.tokens = min(self.capacity, self.tokens + elapsed * self.rate)
        self.updated_at = now
        if self.tokens >= 1:
            self.tokens -= 1
            return True
        return False

    def retry_after(self) -> float:
        """Seconds until one token is available."""
        if self.tokens >= 1:
            return 0.0
        return (1 - self.tokens) / self.rate


class RateLimiterPool:
    """Token buckets of one pool, keyed by client, stored in a cache alias."""

    def __init__(
        self,
        config: RateLimitConfig,
        cache_alias: str,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize pool.

        Args:
            config: Pool configuration
            cache_alias: Name of the entry in CACHES holding the buckets
            clock: Wall clock in seconds, shared by all workers
        """
        self.config = config
        self.cache_alias = cache_alias
        self._clock = clock

    @property
    def cache(self) -> BaseCache:
        return caches[self.cache_alias]

    @staticmethod
    def _cache_key(key: str) -> str:
        return f"bucket:{key}"

    def allow(self, key: str) -> bool:
        """
        Take one token from the bucket of a client.

        Args:
            key: Client identifier (usually its IP)

        Returns:
            True if the request is admitted; always True when disabled
        """
        if not self.config.enabled:
            return True

        now = self._clock()
        cache_key = self._cache_key(key)
        bucket = TokenBucket(
            self.config.requests_per_second,
            self.config.burst,
            now,
            state=self.cache.get(cache_key),
        )
        allowed = bucket.allow(now)
        self.cache.set(cache_key, bucket.state, timeout=self.config.cache_ttl)
        return allowed

    def retry_after(self, key: str) -> Optional[float]:
        """Seconds until the client may retry, or None if it has no bucket."""
        state = self.cache.get(self._cache_key(key))
        if state is None:
            return None
        bucket = TokenBucket(
            self.config.requests_per_second, self.config.burst, self._clock(), state=state
        )
        return bucket.retry_after()
