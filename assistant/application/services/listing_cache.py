"""Query-result caches for the per-user listings (tasks, calendar, reminders).

TaskService, CalendarService and ReminderService each receive the cache of
their scope: listings go through QueryResultCache.get_or_load() and every
create/update/delete calls invalidate(user_id).
"""

from assistant.core.constants import (
    CACHE_PREFIX_CALENDAR_EVENTS,
    CACHE_PREFIX_REMINDERS,
    CACHE_PREFIX_TASKS,
    CALENDAR_EVENTS_QUERY_TTL,
    REMINDERS_QUERY_TTL,
    TASKS_QUERY_TTL,
)
from assistant.infrastructure.cache import CacheProtocol, QueryResultCache

LISTING_TTLS: dict[str, int] = {
    CACHE_PREFIX_TASKS: TASKS_QUERY_TTL,
    CACHE_PREFIX_CALENDAR_EVENTS: CALENDAR_EVENTS_QUERY_TTL,
    CACHE_PREFIX_REMINDERS: REMINDERS_QUERY_TTL,
}


def build_listing_caches(cache: CacheProtocol) -> dict[str, QueryResultCache]:
    """One QueryResultCache per listing scope, keyed by scope."""
    return {scope: QueryResultCache(cache, scope, ttl) for scope, ttl in LISTING_TTLS.items()}
