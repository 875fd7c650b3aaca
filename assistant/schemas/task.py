"""Task request schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints, field_validator

from assistant.domain.enums import TaskPriority, TaskStatus
from assistant.shared.utils import as_utc, utc_now

Tag = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=30)]


def future_datetime(value: datetime | None, field: str) -> datetime | None:
    """Normalize to UTC (naive input is treated as UTC) and require a future instant."""
    if value is None:
        return None
    value = as_utc(value)
    if value <= utc_now():
        raise ValueError(f"{field} must be in the future")
    return value


class TaskCreateRequest(BaseModel):
    """Body for POST /tasks."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None
    tags: list[Tag] = Field(default_factory=list, max_length=10)
    estimated_duration: int | None = Field(default=None, ge=1, le=1440)

    @field_validator("due_date")
    @classmethod
    def due_date_in_future(cls, v: datetime | None) -> datetime | None:
        return future_datetime(v, "due_date")


class TaskUpdateRequest(BaseModel):
    """Body for PUT /tasks/{id}. Only fields present in the body are changed."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None
    tags: Annotated[list[Tag], Field(max_length=10)] | None = None
    estimated_duration: int | None = Field(default=None, ge=1, le=1440)

    @field_validator("due_date")
    @classmethod
    def due_date_in_future(cls, v: datetime | None) -> datetime | None:
        return future_datetime(v, "due_date")
