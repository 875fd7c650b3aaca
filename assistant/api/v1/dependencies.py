"""Presentation-layer dependencies.

Services and the cache are constructed once in assistant.core.lifespan and
read from app.state here; routes never build infrastructure themselves.
The acting user comes from the X-User-ID header (authentication is handled
upstream).
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from assistant.application.services import (
    CalendarService,
    ChatService,
    EmailService,
    OrderService,
    ReminderService,
    TaskService,
)
from assistant.core.config import get_settings
from assistant.infrastructure.cache import KeyValueCache
from assistant.infrastructure.cache.keys import has_reserved_chars

USER_ID_MAX_LENGTH = 64


def is_valid_user_id(value: str | None) -> bool:
    """User IDs become cache key components: non-empty, bounded, no ':' or glob characters."""
    if not value or len(value) > USER_ID_MAX_LENGTH:
        return False
    return not has_reserved_chars(value)


def get_user_id(request: Request) -> str:
    """Resolve the acting user from the configured header."""
    name = get_settings().user_id_header
    value = (request.headers.get(name) or "").strip()
    if not value:
        raise HTTPException(status_code=401, detail=f"Missing required header: {name}")
    if not is_valid_user_id(value):
        raise HTTPException(status_code=400, detail=f"Invalid {name} header")
    return value


def get_cache(request: Request) -> KeyValueCache:
    return request.app.state.cache


def get_order_service(request: Request) -> OrderService:
    return request.app.state.order_service


def get_email_service(request: Request) -> EmailService:
    return request.app.state.email_service


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat_service


def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service


def get_calendar_service(request: Request) -> CalendarService:
    return request.app.state.calendar_service


def get_reminder_service(request: Request) -> ReminderService:
    return request.app.state.reminder_service
