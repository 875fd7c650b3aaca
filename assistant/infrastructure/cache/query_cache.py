"""Query-result cache: one page of a filtered listing per key.

Key: {scope}:{actor_id}:{digest}:{page}:{page_size}, where digest is a
SHA-256 prefix of the canonical JSON of the filters (sorted keys, compact
separators), so identical logical queries map to identical keys regardless
of filter insertion order. Any mutation of the underlying entity kind calls
invalidate(), which wildcard-deletes every cached page for the actor.
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from assistant.infrastructure.cache.cache_protocol import CacheProtocol
from assistant.infrastructure.cache.keys import actor_scope_pattern, query_key

logger = logging.getLogger(__name__)

_DIGEST_LENGTH = 16


def canonical_filters(filters: Mapping[str, Any] | None) -> str:
    """Return canonical JSON for filters; None and {} are equivalent."""
    return json.dumps(
        dict(filters or {}),
        sort_keys=True,
        separators=(",", ":"),
        default=str,
    )


def filters_digest(filters: Mapping[str, Any] | None) -> str:
    """Short stable hash of canonical_filters(filters)."""
    canonical = canonical_filters(filters).encode("utf-8")
    return hashlib.sha256(canonical).hexdigest()[:_DIGEST_LENGTH]


class QueryResultCache:
    """Read-through cache for paginated query results of one entity kind."""

    def __init__(self, cache: CacheProtocol, scope: str, ttl: int) -> None:
        self.cache = cache
        self.scope = scope
        self.ttl = ttl

    def key_for(
        self,
        actor_id: str,
        filters: Mapping[str, Any] | None,
        page: int,
        page_size: int,
    ) -> str:
        return query_key(self.scope, actor_id, filters_digest(filters), page, page_size)

    async def get_or_load(
        self,
        actor_id: str,
        filters: Mapping[str, Any] | None,
        page: int,
        page_size: int,
        loader: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Return the cached page, or await loader(), cache and return its result.

        Loader errors propagate (the primary store is authoritative); cache
        failures never do. None results are not cached.
        """
        key = self.key_for(actor_id, filters, page, page_size)
        cached = await self.cache.get(key)
        if cached is not None:
            return cached
        result = await loader()
        if result is not None:
            await self.cache.set(key, result, ttl=self.ttl)
        return result

    async def invalidate(self, actor_id: str) -> bool:
        """Drop every cached page of this scope for actor_id."""
        pattern = actor_scope_pattern(self.scope, actor_id)
        removed = await self.cache.delete(pattern)
        logger.debug("Query cache invalidated: %s (removed=%s)", pattern, removed)
        return removed
