"""Fixed-window request counter backed by Redis."""

import logging
from dataclasses import dataclass

import redis.asyncio as redis

logger = logging.getLogger(__name__)


@dataclass
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_seconds: int


class RateLimiter:
    """Counts hits per key in fixed windows (INCR + EXPIRE)."""

    def __init__(self, client: redis.Redis, prefix: str = "halodompet:ratelimit"):
        self.client = client
        self.prefix = prefix

    async def hit(self, key: str, limit: int, window_seconds: int) -> RateLimitResult:
        """Register one request for ``key``.

        Args:
            key: Bucket identity, e.g. "demo-stt:203.0.113.7"
            limit: Requests allowed per window
            window_seconds: Window length

        Returns:
            Whether the request is allowed, plus remaining quota and reset time
        """
        redis_key = f"{self.prefix}:{key}"
        count = await self.client.incr(redis_key)
        if count == 1:
            await self.client.expire(redis_key, window_seconds)

        ttl = await self.client.ttl(redis_key)
        if ttl is None or ttl < 0:
            # Key lost its expiry (e.g. crash between INCR and EXPIRE)
            await self.client.expire(redis_key, window_seconds)
            ttl = window_seconds

        if count > limit:
            logger.warning("Rate limit exceeded for %s (%s/%s)", key, count, limit)
            return RateLimitResult(allowed=False, remaining=0, reset_seconds=ttl)
        return RateLimitResult(allowed=True, remaining=limit - count, reset_seconds=ttl)
