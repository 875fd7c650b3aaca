"""Chat with canned assistant replies; history kept in the cache.

History is an append-order capped list of message dicts
(chat_history:{user}, last 100 messages, 24h). HTTP chat is limited to
30 messages per minute per user; the realtime socket has its own
20-per-minute window and does not record history.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from assistant.core.constants import (
    CACHE_PREFIX_CHAT_HISTORY,
    CHAT_HISTORY_CAP,
    CHAT_HISTORY_TTL,
    MINUTE,
    RATE_SCOPE_CHAT,
    RATE_SCOPE_SOCKET,
)
from assistant.domain.enums import ChatSender
from assistant.domain.exceptions import ValidationException
from assistant.infrastructure.cache import CacheProtocol, IndexList, RateLimiter, RateLimitPolicy
from assistant.shared.utils import generate_id, utc_now_iso

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 1000

_WORD = re.compile(r"[a-z']+")


class CannedResponder:
    """Keyword lookup table mapping a message to a fixed reply."""

    HELP = (
        "I can help you manage tasks, calendar events, reminders, emails and "
        "food orders. Try asking me to create a task or check your orders."
    )
    DEFAULT = (
        "I'm here to help with your tasks, schedule, emails and orders. "
        "Could you tell me a bit more about what you need?"
    )
    INTENTS: tuple[tuple[frozenset[str], str], ...] = (
        (
            frozenset({"hi", "hello", "hey", "morning", "afternoon", "evening"}),
            "Hello! How can I help you be productive today?",
        ),
        (
            frozenset({"task", "tasks", "todo"}),
            "I can help with tasks. Open the Tasks tab to add or review them.",
        ),
        (
            frozenset({"meeting", "calendar", "schedule", "event"}),
            "Let's look at your calendar. You can add events from the Calendar tab.",
        ),
        (
            frozenset({"remind", "reminder", "reminders"}),
            "Sure, I can set a reminder. When should I remind you?",
        ),
        (
            frozenset({"email", "emails", "mail"}),
            "I can draft, send or schedule emails for you.",
        ),
        (
            frozenset({"food", "order", "hungry", "restaurant", "pizza"}),
            "Hungry? Browse restaurants and place an order from the Orders tab.",
        ),
        (
            frozenset({"thanks", "thank", "thx"}),
            "You're welcome! Anything else I can do?",
        ),
    )

    def reply(self, message: str) -> str:
        lowered = message.lower().strip()
        if lowered.startswith("/") or "help" in lowered:
            return self.HELP
        words = set(_WORD.findall(lowered))
        for keywords, response in self.INTENTS:
            if words & keywords:
                return response
        return self.DEFAULT


def _message(text: str, sender: ChatSender, message_type: str) -> dict[str, Any]:
    return {
        "id": generate_id("msg"),
        "message": text,
        "sender": sender.value,
        "timestamp": utc_now_iso(),
        "message_type": message_type,
    }


class ChatService:
    """Chat messages, canned replies and per-user history."""

    def __init__(
        self,
        cache: CacheProtocol,
        *,
        rate_limit_per_minute: int = 30,
        socket_rate_limit_per_minute: int = 20,
        responder: CannedResponder | None = None,
    ) -> None:
        self.cache = cache
        self.responder = responder or CannedResponder()
        self.rate_limiter = RateLimiter(
            cache, RateLimitPolicy(RATE_SCOPE_CHAT, rate_limit_per_minute, MINUTE)
        )
        self.socket_rate_limiter = RateLimiter(
            cache, RateLimitPolicy(RATE_SCOPE_SOCKET, socket_rate_limit_per_minute, MINUTE)
        )
        self.history_list = IndexList(
            cache,
            CACHE_PREFIX_CHAT_HISTORY,
            CHAT_HISTORY_CAP,
            CHAT_HISTORY_TTL,
            newest_first=False,
        )

    @staticmethod
    def _clean(message: Any) -> str:
        if not isinstance(message, str) or not message.strip():
            raise ValidationException("Message must be a non-empty string", field="message")
        if len(message) > MAX_MESSAGE_LENGTH:
            raise ValidationException(
                f"Message must be at most {MAX_MESSAGE_LENGTH} characters", field="message"
            )
        return message.strip()

    async def post_message(
        self, user_id: str, message: str, message_type: str = "text"
    ) -> dict[str, Any]:
        """Record the user message and a canned reply in history; return both.

        Raises:
            RateLimitExceededException: Too many messages this minute.
            ValidationException: Empty or oversized message.
        """
        text = self._clean(message)
        await self.rate_limiter.enforce(user_id)
        user_message = _message(text, ChatSender.USER, message_type)
        await self.history_list.push(user_id, user_message)
        ai_message = _message(self.responder.reply(text), ChatSender.AI, "response")
        await self.history_list.push(user_id, ai_message)
        logger.info("Chat message processed for user: %s", user_id)
        return {"user_message": user_message, "ai_message": ai_message}

    async def respond_realtime(self, user_id: str, message: Any) -> dict[str, Any]:
        """Socket path: rate-limited echo plus canned reply, no history."""
        text = self._clean(message)
        await self.socket_rate_limiter.enforce(user_id)
        return {
            "user_message": _message(text, ChatSender.USER, "text"),
            "ai_message": _message(self.responder.reply(text), ChatSender.AI, "response"),
        }

    async def history(self, user_id: str, limit: int = 50) -> list[dict[str, Any]]:
        """Last `limit` messages, oldest first."""
        return await self.history_list.items(user_id, limit)

    async def clear_history(self, user_id: str) -> bool:
        cleared = await self.history_list.clear(user_id)
        logger.info("Chat history cleared for user: %s", user_id)
        return cleared
