"""Application lifespan: startup and shutdown.

Composition root for the cache: builds the single KeyValueCache, connects
it, builds the services on top of it and attaches everything to app.state.
Cache connection failure is logged and the app starts anyway (cache is
non-essential); shutdown closes the connection gracefully.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from assistant.api.websocket import ConnectionManager
from assistant.application.services import (
    CalendarService,
    ChatService,
    EmailService,
    OrderService,
    ReminderService,
    TaskService,
    build_listing_caches,
)
from assistant.core.config import Settings, get_settings
from assistant.core.constants import (
    CACHE_PREFIX_CALENDAR_EVENTS,
    CACHE_PREFIX_REMINDERS,
    CACHE_PREFIX_TASKS,
)
from assistant.infrastructure.cache import KeyValueCache
from assistant.shared.logging import setup_logging

logger = logging.getLogger(__name__)


def build_services(app: FastAPI, cache: KeyValueCache, settings: Settings) -> None:
    """Attach cache, services and WebSocket manager to app.state."""
    app.state.cache = cache
    app.state.order_service = OrderService(
        cache,
        confirm_delay=settings.order_confirm_delay_seconds,
        prepare_delay=settings.order_prepare_delay_seconds,
    )
    app.state.email_service = EmailService(
        cache, rate_limit_per_hour=settings.email_rate_limit_per_hour
    )
    app.state.chat_service = ChatService(
        cache,
        rate_limit_per_minute=settings.chat_rate_limit_per_minute,
        socket_rate_limit_per_minute=settings.socket_rate_limit_per_minute,
    )
    listing_caches = build_listing_caches(cache)
    app.state.task_service = TaskService(cache, listing_caches[CACHE_PREFIX_TASKS])
    app.state.calendar_service = CalendarService(
        cache, listing_caches[CACHE_PREFIX_CALENDAR_EVENTS]
    )
    app.state.reminder_service = ReminderService(cache, listing_caches[CACHE_PREFIX_REMINDERS])
    app.state.ws_manager = ConnectionManager()


async def close_services(app: FastAPI) -> None:
    """Stop background work and close the cache connection."""
    order_service = getattr(app.state, "order_service", None)
    if order_service is not None:
        await order_service.shutdown()
        logger.info("Order progression tasks stopped")

    cache = getattr(app.state, "cache", None)
    if cache is not None:
        await cache.shutdown()
        logger.info("Cache disconnected")


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: logging, cache (connect if enabled), services.
    Shutdown: order progression tasks, cache connection.
    """
    settings = get_settings()
    setup_logging(settings)

    # ---- Startup ----
    if settings.redis_enabled:
        cache = KeyValueCache.from_settings(settings)
        await cache.connect()
    else:
        cache = KeyValueCache(None)
        logger.info("Redis cache disabled by configuration")
    build_services(app, cache, settings)

    yield

    # ---- Shutdown ----
    await close_services(app)
