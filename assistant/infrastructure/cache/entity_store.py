"""Ephemeral entity store: whole JSON entities kept in the cache under a TTL.

Used for orders, sent emails, drafts and scheduled emails, where the TTL
stands in for persistence. A load after expiry is a plain miss (None).
"""

from __future__ import annotations

from typing import Any

from assistant.infrastructure.cache.cache_protocol import CacheProtocol
from assistant.infrastructure.cache.keys import entity_key, has_reserved_chars


class EntityStore:
    """Entities of one kind stored under {prefix}:{id}."""

    def __init__(self, cache: CacheProtocol, prefix: str, ttl: int) -> None:
        self.cache = cache
        self.prefix = prefix
        self.ttl = ttl

    def key(self, entity_id: str) -> str:
        return entity_key(self.prefix, entity_id)

    async def save(self, entity_id: str, entity: dict[str, Any]) -> bool:
        """Store (or overwrite) the entity; refreshes its TTL."""
        return await self.cache.set(self.key(entity_id), entity, ttl=self.ttl)

    async def load(self, entity_id: str) -> dict[str, Any] | None:
        """Return the entity, or None if missing, expired or not a JSON object.

        IDs that could never form a valid key (e.g. from a URL path) are a miss.
        """
        if not entity_id or has_reserved_chars(entity_id):
            return None
        value = await self.cache.get(self.key(entity_id))
        if not isinstance(value, dict):
            return None
        return value

    async def remove(self, entity_id: str) -> bool:
        return await self.cache.delete(self.key(entity_id))
