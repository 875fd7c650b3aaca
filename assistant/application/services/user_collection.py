"""Per-user entity collections with cached listing pages.

Tasks, calendar events and reminders share one storage shape: each entity
lives in an EntityStore ({kind}:{id}), the user's IDs in a newest-first
IndexList (user_{kind}s:{user}), and filtered listing pages in a
QueryResultCache ({scope}:{user}:{digest}:{page}:{limit}). Every create,
update and delete invalidates the user's cached pages for that kind, so a
listing never outlives the mutation that changed it.
"""

from __future__ import annotations

import logging
import math
from datetime import UTC, datetime
from typing import Any

from assistant.domain.exceptions import ResourceNotFoundException
from assistant.infrastructure.cache import CacheProtocol, EntityStore, IndexList, QueryResultCache
from assistant.shared.utils import generate_id, utc_now_iso

logger = logging.getLogger(__name__)

# Sort key for entities whose date field is missing
EPOCH = datetime.min.replace(tzinfo=UTC)


def paginate(items: list[Any], page: int, limit: int) -> tuple[list[Any], dict[str, int]]:
    """Slice one page (1-based) and describe it as {page, limit, total, pages}."""
    total = len(items)
    start = (page - 1) * limit
    return items[start : start + limit], {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }


class UserCollection:
    """Base for services owning one entity kind per user.

    Subclasses set `kind` (entity name used for IDs and errors) and build
    their listing on top of all_for_user() through self.listing.
    """

    kind: str = "entity"

    def __init__(
        self,
        cache: CacheProtocol,
        listing: QueryResultCache,
        *,
        prefix: str,
        ttl: int,
        index_scope: str,
        index_cap: int,
        index_ttl: int,
    ) -> None:
        self.cache = cache
        self.listing = listing
        self.store = EntityStore(cache, prefix, ttl)
        self.index = IndexList(cache, index_scope, index_cap, index_ttl)

    async def all_for_user(self, user_id: str) -> list[dict[str, Any]]:
        """Every stored entity of the user (expired ones are skipped)."""
        return await self.index.resolve(user_id, self.store)

    async def get(self, user_id: str, entity_id: str) -> dict[str, Any]:
        """Return the user's entity. Raises ResourceNotFoundException.

        Entities of other users are reported as missing.
        """
        entity = await self.store.load(entity_id)
        if entity is None or str(entity.get("user_id")) != str(user_id):
            raise ResourceNotFoundException(self.kind, entity_id)
        return entity

    async def _insert(self, user_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        now = utc_now_iso()
        entity = {
            "id": generate_id(self.kind),
            "user_id": user_id,
            **fields,
            "created_at": now,
            "updated_at": now,
        }
        await self.store.save(entity["id"], entity)
        await self.index.push(user_id, entity["id"])
        await self.listing.invalidate(user_id)
        logger.info("%s created: %s by user: %s", self.kind.capitalize(), entity["id"], user_id)
        return entity

    async def _replace(self, user_id: str, entity: dict[str, Any]) -> dict[str, Any]:
        entity["updated_at"] = utc_now_iso()
        await self.store.save(entity["id"], entity)
        await self.listing.invalidate(user_id)
        logger.info("%s updated: %s by user: %s", self.kind.capitalize(), entity["id"], user_id)
        return entity

    async def delete(self, user_id: str, entity_id: str) -> None:
        """Remove the user's entity and its index entry. Raises ResourceNotFoundException."""
        await self.get(user_id, entity_id)
        await self.store.remove(entity_id)
        await self.index.remove(user_id, entity_id)
        await self.listing.invalidate(user_id)
        logger.info("%s deleted: %s by user: %s", self.kind.capitalize(), entity_id, user_id)
