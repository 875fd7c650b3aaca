"""Reminders with cached listings (reminders scope, 5 minutes)."""

from __future__ import annotations

from typing import Any

from assistant.application.services.user_collection import EPOCH, UserCollection, paginate
from assistant.core.constants import (
    CACHE_PREFIX_REMINDER,
    CACHE_PREFIX_USER_REMINDERS,
    REMINDER_TTL,
    USER_REMINDERS_CAP,
    USER_REMINDERS_TTL,
)
from assistant.domain.exceptions import ValidationException
from assistant.infrastructure.cache import CacheProtocol, QueryResultCache
from assistant.schemas.reminder import ReminderCreateRequest, ReminderUpdateRequest
from assistant.shared.utils import parse_iso, utc_now_iso


class ReminderService(UserCollection):
    """Create, list, update and delete a user's reminders."""

    kind = "reminder"

    def __init__(self, cache: CacheProtocol, listing: QueryResultCache) -> None:
        super().__init__(
            cache,
            listing,
            prefix=CACHE_PREFIX_REMINDER,
            ttl=REMINDER_TTL,
            index_scope=CACHE_PREFIX_USER_REMINDERS,
            index_cap=USER_REMINDERS_CAP,
            index_ttl=USER_REMINDERS_TTL,
        )

    async def create(self, user_id: str, request: ReminderCreateRequest) -> dict[str, Any]:
        fields = request.model_dump(mode="json")
        fields.update(is_completed=False, completed_at=None, notification_sent=False)
        return await self._insert(user_id, fields)

    async def update(
        self, user_id: str, reminder_id: str, request: ReminderUpdateRequest
    ) -> dict[str, Any]:
        """Merge the changed fields.

        Turning recurrence off clears recurring_type; a recurring reminder
        without a recurring_type raises ValidationException.
        """
        reminder = await self.get(user_id, reminder_id)
        changes = request.model_dump(mode="json", exclude_unset=True)
        reminder.update(changes)
        if not reminder.get("is_recurring"):
            reminder["recurring_type"] = None
        elif not reminder.get("recurring_type"):
            raise ValidationException(
                "recurring_type is required for recurring reminders", field="recurring_type"
            )
        if "is_completed" in changes:
            if changes["is_completed"]:
                reminder["completed_at"] = reminder.get("completed_at") or utc_now_iso()
            else:
                reminder["completed_at"] = None
        return await self._replace(user_id, reminder)

    async def list_reminders(
        self,
        user_id: str,
        *,
        completed: bool | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> dict[str, Any]:
        """One page of reminders ordered by reminder_date, optionally by completion."""
        filters = {} if completed is None else {"is_completed": completed}

        async def load() -> dict[str, Any]:
            reminders = [
                r
                for r in await self.all_for_user(user_id)
                if completed is None or bool(r.get("is_completed")) is completed
            ]
            reminders.sort(key=lambda r: parse_iso(r.get("reminder_date")) or EPOCH)
            page_items, pagination = paginate(reminders, page, limit)
            return {"reminders": page_items, "pagination": pagination}

        return await self.listing.get_or_load(user_id, filters, page, limit, load)
