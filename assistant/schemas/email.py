"""Email request schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from assistant.domain.enums import EmailPriority


class SendEmailRequest(BaseModel):
    """Body for POST /emails/send. schedule_for set = scheduled, else sent now."""

    to: list[str] = Field(..., min_length=1, max_length=50)
    cc: list[str] = Field(default_factory=list, max_length=50)
    bcc: list[str] = Field(default_factory=list, max_length=50)
    subject: str = Field(..., min_length=1, max_length=200)
    body: str = Field(..., min_length=1, max_length=10_000)
    priority: EmailPriority = EmailPriority.NORMAL
    schedule_for: datetime | None = None
    template: str | None = Field(default=None, max_length=100)
    attachments: list[str] = Field(default_factory=list, max_length=10)


class DraftRequest(BaseModel):
    """Body for POST /emails/drafts. All fields optional for partial drafts."""

    to: list[str] = Field(default_factory=list, max_length=50)
    cc: list[str] = Field(default_factory=list, max_length=50)
    bcc: list[str] = Field(default_factory=list, max_length=50)
    subject: str = Field(default="", max_length=200)
    body: str = Field(default="", max_length=10_000)
