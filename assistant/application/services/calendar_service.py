"""Calendar events with cached listings (calendar_events scope, 10 minutes)."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from assistant.application.services.user_collection import EPOCH, UserCollection, paginate
from assistant.core.constants import (
    CACHE_PREFIX_CALENDAR_EVENT,
    CACHE_PREFIX_USER_CALENDAR_EVENTS,
    CALENDAR_EVENT_TTL,
    USER_CALENDAR_EVENTS_CAP,
    USER_CALENDAR_EVENTS_TTL,
)
from assistant.domain.enums import EventStatus
from assistant.domain.exceptions import ValidationException
from assistant.infrastructure.cache import CacheProtocol, QueryResultCache
from assistant.schemas.calendar import EventCreateRequest, EventUpdateRequest
from assistant.shared.utils import as_utc, parse_iso, utc_now

UPCOMING_WINDOW = timedelta(days=7)
UPCOMING_LIMIT = 5


def _start(event: dict[str, Any]) -> datetime:
    return parse_iso(event.get("start_date")) or EPOCH


class CalendarService(UserCollection):
    """Schedule, list, update and delete a user's calendar events."""

    kind = "event"

    def __init__(self, cache: CacheProtocol, listing: QueryResultCache) -> None:
        super().__init__(
            cache,
            listing,
            prefix=CACHE_PREFIX_CALENDAR_EVENT,
            ttl=CALENDAR_EVENT_TTL,
            index_scope=CACHE_PREFIX_USER_CALENDAR_EVENTS,
            index_cap=USER_CALENDAR_EVENTS_CAP,
            index_ttl=USER_CALENDAR_EVENTS_TTL,
        )

    async def create(self, user_id: str, request: EventCreateRequest) -> dict[str, Any]:
        fields = request.model_dump(mode="json")
        fields["status"] = EventStatus.SCHEDULED.value
        return await self._insert(user_id, fields)

    async def update(
        self, user_id: str, event_id: str, request: EventUpdateRequest
    ) -> dict[str, Any]:
        """Merge the changed fields. Raises ValidationException if the dates end up out of order."""
        event = await self.get(user_id, event_id)
        event.update(request.model_dump(mode="json", exclude_unset=True))
        end = parse_iso(event.get("end_date"))
        if end is not None and end <= _start(event):
            raise ValidationException("end_date must be after start_date", field="end_date")
        return await self._replace(user_id, event)

    async def list_events(
        self,
        user_id: str,
        *,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        category: str | None = None,
        status: str | None = None,
        page: int = 1,
        limit: int = 50,
    ) -> dict[str, Any]:
        """Events starting inside [start_date, end_date], soonest first.

        Also returns up to five scheduled events in the next seven days and
        per-status counts over all of the user's events.
        """
        window_from = as_utc(start_date) if start_date else None
        window_to = as_utc(end_date) if end_date else None
        filters = {
            name: value
            for name, value in (
                ("start_date", window_from.isoformat() if window_from else None),
                ("end_date", window_to.isoformat() if window_to else None),
                ("category", category),
                ("status", status),
            )
            if value
        }

        def matches(event: dict[str, Any]) -> bool:
            start = _start(event)
            if window_from and start < window_from:
                return False
            if window_to and start > window_to:
                return False
            if category and event.get("category") != category:
                return False
            return not status or event.get("status") == status

        async def load() -> dict[str, Any]:
            events = sorted(await self.all_for_user(user_id), key=_start)
            now = utc_now()
            upcoming = [
                e
                for e in events
                if e.get("status") == EventStatus.SCHEDULED.value
                and now <= _start(e) <= now + UPCOMING_WINDOW
            ]
            page_items, pagination = paginate([e for e in events if matches(e)], page, limit)
            by_status = {s.value: 0 for s in EventStatus}
            for e in events:
                if e.get("status") in by_status:
                    by_status[e["status"]] += 1
            return {
                "events": page_items,
                "upcoming_events": upcoming[:UPCOMING_LIMIT],
                "pagination": pagination,
                "stats": {"total": pagination["total"], **by_status},
            }

        return await self.listing.get_or_load(user_id, filters, page, limit, load)
