"""Capped index list: an ordered list of items under one key, bounded to N.

Usually holds entity IDs indexing an EntityStore (user_orders, user_emails,
user_drafts); chat history stores whole message dicts the same way.

Newest-first lists insert at the head and drop from the tail; append-order
lists insert at the tail and drop from the head. Either way the list keeps
the `cap` most recent items.

Updates are read-modify-write without locking: two concurrent pushes may
read the same snapshot and one insert can be lost. Acceptable for
best-effort history; do not use for anything that needs exact counts.
"""

from __future__ import annotations

import logging
from typing import Any

from assistant.infrastructure.cache.cache_protocol import CacheProtocol
from assistant.infrastructure.cache.entity_store import EntityStore
from assistant.infrastructure.cache.keys import index_list_key

logger = logging.getLogger(__name__)


class IndexList:
    """Per-actor capped list stored as one JSON array under {scope}:{actor_id}."""

    def __init__(
        self,
        cache: CacheProtocol,
        scope: str,
        cap: int,
        ttl: int,
        newest_first: bool = True,
    ) -> None:
        """Initialize list settings.

        Args:
            cache: Backing cache.
            scope: Key scope (e.g. "user_orders").
            cap: Maximum number of items kept (must be positive).
            ttl: TTL in seconds applied on every write.
            newest_first: Insert at head (True) or append at tail (False).
        """
        if cap <= 0:
            raise ValueError("cap must be positive")
        self.cache = cache
        self.scope = scope
        self.cap = cap
        self.ttl = ttl
        self.newest_first = newest_first

    def key(self, actor_id: str) -> str:
        return index_list_key(self.scope, actor_id)

    async def _read(self, actor_id: str) -> list[Any]:
        value = await self.cache.get(self.key(actor_id))
        if value is None:
            return []
        if not isinstance(value, list):
            logger.warning("Index list %s holds a non-list value; resetting", self.key(actor_id))
            return []
        return value

    def _trim(self, items: list[Any]) -> list[Any]:
        if len(items) <= self.cap:
            return items
        if self.newest_first:
            return items[: self.cap]
        return items[-self.cap :]

    async def push(self, actor_id: str, item: Any) -> list[Any]:
        """Insert item, truncate to cap, write back with ttl. Returns the new list."""
        items = await self._read(actor_id)
        if self.newest_first:
            items.insert(0, item)
        else:
            items.append(item)
        items = self._trim(items)
        await self.cache.set(self.key(actor_id), items, ttl=self.ttl)
        return items

    async def items(self, actor_id: str, limit: int | None = None) -> list[Any]:
        """Return up to `limit` most recent items in stored order."""
        items = await self._read(actor_id)
        if limit is None:
            return items
        if limit <= 0:
            return []
        if self.newest_first:
            return items[:limit]
        return items[-limit:]

    async def count(self, actor_id: str) -> int:
        return len(await self._read(actor_id))

    async def remove(self, actor_id: str, item: Any) -> bool:
        """Remove every occurrence of item. True if the list changed."""
        items = await self._read(actor_id)
        kept = [i for i in items if i != item]
        if len(kept) == len(items):
            return False
        return await self.cache.set(self.key(actor_id), kept, ttl=self.ttl)

    async def clear(self, actor_id: str) -> bool:
        return await self.cache.delete(self.key(actor_id))

    async def resolve(
        self,
        actor_id: str,
        store: EntityStore,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch the entities for the listed IDs; expired entities are skipped."""
        entities: list[dict[str, Any]] = []
        for entity_id in await self.items(actor_id, limit):
            entity = await store.load(str(entity_id))
            if entity is not None:
                entities.append(entity)
        return entities
