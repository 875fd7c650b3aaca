"""Domain enums (orders, emails, chat senders, tasks, calendar events, reminders)."""

from enum import Enum


class OrderStatus(str, Enum):
    """Food order lifecycle."""

    PLACED = "placed"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @classmethod
    def terminal(cls) -> frozenset["OrderStatus"]:
        """Statuses from which an order can no longer be cancelled or advanced."""
        return frozenset({cls.OUT_FOR_DELIVERY, cls.DELIVERED, cls.CANCELLED})


class EmailStatus(str, Enum):
    """Email lifecycle."""

    DRAFT = "draft"
    SCHEDULED = "scheduled"
    SENDING = "sending"
    SENT = "sent"
    FAILED = "failed"


class EmailPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class ChatSender(str, Enum):
    USER = "user"
    AI = "ai"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class EventStatus(str, Enum):
    """Calendar event lifecycle."""

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class EventCategory(str, Enum):
    WORK = "work"
    PERSONAL = "personal"
    MEETING = "meeting"
    APPOINTMENT = "appointment"
    OTHER = "other"


class EventPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RecurrenceType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
