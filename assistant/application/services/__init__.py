"""Application services."""

from assistant.application.services.calendar_service import CalendarService
from assistant.application.services.chat_service import CannedResponder, ChatService
from assistant.application.services.email_service import (
    EmailService,
    MessageSender,
    SendResult,
    SimulatedSender,
)
from assistant.application.services.listing_cache import build_listing_caches
from assistant.application.services.order_service import OrderService
from assistant.application.services.reminder_service import ReminderService
from assistant.application.services.task_service import TaskService

__all__ = [
    "CalendarService",
    "CannedResponder",
    "ChatService",
    "EmailService",
    "MessageSender",
    "OrderService",
    "ReminderService",
    "SendResult",
    "SimulatedSender",
    "TaskService",
    "build_listing_caches",
]
