"""Domain layer: enums and exceptions.

No dependencies on infrastructure or presentation. Used by application
and API layers.
"""

from assistant.domain.enums import ChatSender, EmailPriority, EmailStatus, OrderStatus
from assistant.domain.exceptions import (
    AssistantException,
    AuthorizationException,
    InvalidStateTransitionException,
    RateLimitExceededException,
    ResourceNotFoundException,
    ValidationException,
)

__all__ = [
    # Enums
    "ChatSender",
    "EmailPriority",
    "EmailStatus",
    "OrderStatus",
    # Exceptions
    "AssistantException",
    "AuthorizationException",
    "InvalidStateTransitionException",
    "RateLimitExceededException",
    "ResourceNotFoundException",
    "ValidationException",
]
