"""Domain exceptions for the assistant application.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns; the cache
layer never raises them. Presentation layer maps them to HTTP responses
in exception handlers.
"""

from typing import Any


class AssistantException(Exception):
    """Base exception for all assistant application errors.

    Presentation layer maps these to HTTP responses using message,
    error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(AssistantException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthorizationException(AssistantException):
    """Raised when an actor touches a resource owned by someone else."""

    def __init__(
        self,
        resource: str | None = None,
        message: str = "Access denied",
    ) -> None:
        details = {"resource": resource} if resource else {}
        super().__init__(message, "AUTHORIZATION_ERROR", details)


class ResourceNotFoundException(AssistantException):
    """Raised when a requested resource does not exist (or has expired)."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and ID.

        Args:
            resource_type: Kind of resource (e.g. "order", "email").
            resource_id: Identifier that was looked up.
        """
        super().__init__(
            f"{resource_type.capitalize()} not found",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class RateLimitExceededException(AssistantException):
    """Raised when an actor exceeds a fixed-window rate limit."""

    def __init__(
        self,
        scope: str,
        limit: int,
        retry_after: int | None = None,
        message: str | None = None,
    ) -> None:
        """Initialize with scope, limit and optional retry hint.

        Args:
            scope: Rate limiter scope (e.g. "email", "chat").
            limit: Allowed requests per window.
            retry_after: Seconds until the window resets, when known.
            message: Optional override for the default message.
        """
        details: dict[str, Any] = {"scope": scope, "limit": limit}
        if retry_after is not None:
            details["retry_after"] = retry_after
        super().__init__(
            message or f"{scope.capitalize()} rate limit exceeded. Please try again later.",
            "RATE_LIMIT_EXCEEDED",
            details,
        )
        self.retry_after = retry_after


class InvalidStateTransitionException(AssistantException):
    """Raised when an entity cannot move to the requested status."""

    def __init__(self, resource_type: str, current_status: str, target_status: str) -> None:
        super().__init__(
            f"{resource_type.capitalize()} cannot be {target_status} at this stage",
            "INVALID_STATE_TRANSITION",
            {"current_status": current_status, "target_status": target_status},
        )
