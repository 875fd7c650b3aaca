"""Cache protocol for usage patterns and services (DIP).

KeyValueCache is the production implementation. Rate limiter, index lists,
entity stores and query caches depend only on this protocol.
"""

from typing import Any, Protocol


class CacheProtocol(Protocol):
    """Protocol for key-value cache backends. Operations never raise."""

    def is_available(self) -> bool:
        """Return True if cache is connected and usable."""
        ...

    async def get(self, key: str) -> Any:
        """Return cached value or None."""
        ...

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store value with optional TTL in seconds (0 = no expiry)."""
        ...

    async def delete(self, key: str) -> bool:
        """Remove key (or wildcard pattern) from cache."""
        ...

    async def expire(self, key: str, seconds: int) -> bool:
        """Set TTL on an existing key."""
        ...

    async def ttl(self, key: str) -> int:
        """Remaining TTL in seconds, -1 when unknown."""
        ...

    async def increment(self, key: str, amount: int = 1) -> int | None:
        """Atomic increment; None when unavailable."""
        ...
