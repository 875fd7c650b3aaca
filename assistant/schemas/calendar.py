"""Calendar event request schemas."""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from assistant.domain.enums import EventCategory, EventPriority, EventStatus
from assistant.shared.utils import as_utc

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class Attendee(BaseModel):
    email: str = Field(..., max_length=254, pattern=EMAIL_PATTERN)
    name: str | None = Field(default=None, max_length=100)
    status: Literal["pending", "accepted", "declined"] = "pending"


class EventCreateRequest(BaseModel):
    """Body for POST /calendar/events. end_date must be after start_date."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    start_date: datetime
    end_date: datetime
    location: str | None = Field(default=None, max_length=200)
    is_all_day: bool = False
    category: EventCategory = EventCategory.OTHER
    priority: EventPriority = EventPriority.MEDIUM
    attendees: list[Attendee] = Field(default_factory=list, max_length=50)

    @field_validator("start_date", "end_date")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        return as_utc(v)

    @model_validator(mode="after")
    def end_after_start(self) -> "EventCreateRequest":
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class EventUpdateRequest(BaseModel):
    """Body for PUT /calendar/events/{id}; the date order is checked after merging."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    start_date: datetime | None = None
    end_date: datetime | None = None
    location: str | None = Field(default=None, max_length=200)
    is_all_day: bool | None = None
    category: EventCategory | None = None
    priority: EventPriority | None = None
    status: EventStatus | None = None
    attendees: Annotated[list[Attendee], Field(max_length=50)] | None = None

    @field_validator("start_date", "end_date")
    @classmethod
    def to_utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v) if v is not None else None
