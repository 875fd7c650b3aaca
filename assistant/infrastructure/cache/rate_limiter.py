"""Fixed-window rate limiter over the cache's atomic increment.

Key: {scope}_rate_limit:{actor_id}. Each hit INCRs the counter; the window
TTL is set only when the counter is created (count == 1), so later hits do
not extend the window and the counter disappears once the window elapses.
A request is rejected when the post-increment count exceeds the limit.

Fails open: when the cache is unavailable increment() returns None and the
request is allowed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from assistant.domain.exceptions import RateLimitExceededException
from assistant.infrastructure.cache.cache_protocol import CacheProtocol
from assistant.infrastructure.cache.keys import rate_limit_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitPolicy:
    """Allow `limit` hits per `window_seconds` for each actor in `scope`."""

    scope: str
    limit: int
    window_seconds: int


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a single hit.

    Attributes:
        allowed: Whether the request may proceed.
        count: Counter value after this hit (None when cache unavailable).
        limit: Configured limit.
        retry_after: Seconds until the window resets (rejections only, when known).
    """

    allowed: bool
    count: int | None
    limit: int
    retry_after: int | None = None


class RateLimiter:
    """Per-actor fixed-window counter for one policy."""

    def __init__(self, cache: CacheProtocol, policy: RateLimitPolicy) -> None:
        self.cache = cache
        self.policy = policy

    def key(self, actor_id: str) -> str:
        return rate_limit_key(self.policy.scope, actor_id)

    async def hit(self, actor_id: str) -> RateLimitResult:
        """Count one request for actor_id and decide whether it is allowed."""
        key = self.key(actor_id)
        count = await self.cache.increment(key)
        if count is None:
            return RateLimitResult(allowed=True, count=None, limit=self.policy.limit)
        if count == 1:
            await self.cache.expire(key, self.policy.window_seconds)
        elif await self.cache.ttl(key) == -1:
            # Counter without expiry (expire lost after a failed write); start a window now.
            await self.cache.expire(key, self.policy.window_seconds)
        if count > self.policy.limit:
            remaining = await self.cache.ttl(key)
            retry_after = remaining if remaining > 0 else None
            logger.info(
                "Rate limit exceeded: scope=%s actor=%s count=%s limit=%s",
                self.policy.scope,
                actor_id,
                count,
                self.policy.limit,
            )
            return RateLimitResult(
                allowed=False,
                count=count,
                limit=self.policy.limit,
                retry_after=retry_after,
            )
        return RateLimitResult(allowed=True, count=count, limit=self.policy.limit)

    async def enforce(self, actor_id: str) -> RateLimitResult:
        """Like hit(), but raise RateLimitExceededException when rejected."""
        result = await self.hit(actor_id)
        if not result.allowed:
            raise RateLimitExceededException(
                scope=self.policy.scope,
                limit=self.policy.limit,
                retry_after=result.retry_after,
            )
        return result

    async def current(self, actor_id: str) -> int:
        """Return the current window's count (0 when absent or unavailable)."""
        value = await self.cache.get(self.key(actor_id))
        return value if isinstance(value, int) else 0

    async def reset(self, actor_id: str) -> bool:
        return await self.cache.delete(self.key(actor_id))
