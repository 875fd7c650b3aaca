"""Reminder request schemas."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from assistant.domain.enums import RecurrenceType
from assistant.schemas.task import future_datetime


class ReminderCreateRequest(BaseModel):
    """Body for POST /reminders.

    recurring_type is required when is_recurring is set and rejected otherwise.
    """

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=500)
    reminder_date: datetime
    is_recurring: bool = False
    recurring_type: RecurrenceType | None = None

    @field_validator("reminder_date")
    @classmethod
    def reminder_date_in_future(cls, v: datetime) -> datetime:
        return future_datetime(v, "reminder_date")

    @model_validator(mode="after")
    def recurrence_consistent(self) -> "ReminderCreateRequest":
        if self.is_recurring and self.recurring_type is None:
            raise ValueError("recurring_type is required for recurring reminders")
        if not self.is_recurring and self.recurring_type is not None:
            raise ValueError("recurring_type is only allowed for recurring reminders")
        return self


class ReminderUpdateRequest(BaseModel):
    """Body for PUT /reminders/{id}."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=500)
    reminder_date: datetime | None = None
    is_recurring: bool | None = None
    recurring_type: RecurrenceType | None = None
    is_completed: bool | None = None

    @field_validator("reminder_date")
    @classmethod
    def reminder_date_in_future(cls, v: datetime | None) -> datetime | None:
        return future_datetime(v, "reminder_date")
