"""Email sending, scheduling and drafts kept in the cache.

Sent emails (email:{id}, 30d) and drafts (draft:{id}, 30d) are indexed
newest-first per user; scheduled emails (scheduled_email:{id}, 7d) are
indexed in append order. Sending is limited to 50 per user per hour
(fixed window).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from assistant.core.constants import (
    CACHE_PREFIX_DRAFT,
    CACHE_PREFIX_EMAIL,
    CACHE_PREFIX_SCHEDULED_EMAIL,
    CACHE_PREFIX_USER_DRAFTS,
    CACHE_PREFIX_USER_EMAILS,
    CACHE_PREFIX_USER_SCHEDULED_EMAILS,
    DRAFT_TTL,
    EMAIL_TTL,
    HOUR,
    RATE_SCOPE_EMAIL,
    SCHEDULED_EMAIL_TTL,
    USER_DRAFTS_CAP,
    USER_DRAFTS_TTL,
    USER_EMAILS_CAP,
    USER_EMAILS_TTL,
    USER_SCHEDULED_EMAILS_CAP,
    USER_SCHEDULED_EMAILS_TTL,
)
from assistant.domain.enums import EmailStatus
from assistant.domain.exceptions import AuthorizationException, ResourceNotFoundException
from assistant.infrastructure.cache import (
    CacheProtocol,
    EntityStore,
    IndexList,
    RateLimiter,
    RateLimitPolicy,
)
from assistant.schemas.email import DraftRequest, SendEmailRequest
from assistant.shared.utils import generate_id, utc_now_iso

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SendResult:
    success: bool
    message_id: str | None = None
    error: str | None = None


class MessageSender(Protocol):
    """Outbound delivery (SMTP, provider API, ...)."""

    async def send(self, email: dict[str, Any]) -> SendResult: ...


class SimulatedSender:
    """Delivery stub: always succeeds with a generated message ID."""

    async def send(self, email: dict[str, Any]) -> SendResult:
        return SendResult(success=True, message_id=generate_id("msg"))


class EmailService:
    """Send, schedule, draft and look up a user's emails."""

    def __init__(
        self,
        cache: CacheProtocol,
        *,
        rate_limit_per_hour: int = 50,
        sender: MessageSender | None = None,
    ) -> None:
        self.cache = cache
        self.sender = sender or SimulatedSender()
        self.rate_limiter = RateLimiter(
            cache, RateLimitPolicy(RATE_SCOPE_EMAIL, rate_limit_per_hour, HOUR)
        )
        self.emails = EntityStore(cache, CACHE_PREFIX_EMAIL, EMAIL_TTL)
        self.drafts = EntityStore(cache, CACHE_PREFIX_DRAFT, DRAFT_TTL)
        self.scheduled = EntityStore(cache, CACHE_PREFIX_SCHEDULED_EMAIL, SCHEDULED_EMAIL_TTL)
        self.user_emails = IndexList(
            cache, CACHE_PREFIX_USER_EMAILS, USER_EMAILS_CAP, USER_EMAILS_TTL
        )
        self.user_drafts = IndexList(
            cache, CACHE_PREFIX_USER_DRAFTS, USER_DRAFTS_CAP, USER_DRAFTS_TTL
        )
        self.user_scheduled = IndexList(
            cache,
            CACHE_PREFIX_USER_SCHEDULED_EMAILS,
            USER_SCHEDULED_EMAILS_CAP,
            USER_SCHEDULED_EMAILS_TTL,
            newest_first=False,
        )

    async def send_email(self, user_id: str, request: SendEmailRequest) -> dict[str, Any]:
        """Send now, or store as scheduled when schedule_for is set.

        Every call counts against the hourly limit.

        Raises:
            RateLimitExceededException: More than the hourly limit in this window.
        """
        await self.rate_limiter.enforce(user_id)
        scheduled = request.schedule_for is not None
        email: dict[str, Any] = {
            "id": generate_id("email"),
            "user_id": user_id,
            **request.model_dump(mode="json"),
            "status": (EmailStatus.SCHEDULED if scheduled else EmailStatus.SENDING).value,
            "created_at": utc_now_iso(),
            "sent_at": None,
            "delivery_status": {"delivered": False, "opened": False, "clicked": False},
        }

        if scheduled:
            await self.scheduled.save(email["id"], email)
            await self.user_scheduled.push(user_id, email["id"])
            logger.info("Email scheduled: %s by user: %s", email["id"], user_id)
            return email

        try:
            result = await self.sender.send(email)
        except Exception as e:
            logger.exception("Email sending error for %s", email["id"])
            result = SendResult(success=False, error=str(e))
        if result.success:
            email["status"] = EmailStatus.SENT.value
            email["sent_at"] = utc_now_iso()
            email["message_id"] = result.message_id
        else:
            email["status"] = EmailStatus.FAILED.value
            email["error"] = result.error

        await self.emails.save(email["id"], email)
        await self.user_emails.push(user_id, email["id"])
        logger.info("Email %s: %s by user: %s", email["status"], email["id"], user_id)
        return email

    async def save_draft(self, user_id: str, request: DraftRequest) -> dict[str, Any]:
        now = utc_now_iso()
        draft: dict[str, Any] = {
            "id": generate_id("draft"),
            "user_id": user_id,
            **request.model_dump(mode="json"),
            "status": EmailStatus.DRAFT.value,
            "created_at": now,
            "updated_at": now,
        }
        await self.drafts.save(draft["id"], draft)
        await self.user_drafts.push(user_id, draft["id"])
        logger.info("Email draft saved: %s by user: %s", draft["id"], user_id)
        return draft

    def _source_for(self, status: str | None) -> tuple[IndexList, EntityStore]:
        if status == EmailStatus.DRAFT.value:
            return self.user_drafts, self.drafts
        if status == EmailStatus.SCHEDULED.value:
            return self.user_scheduled, self.scheduled
        return self.user_emails, self.emails

    async def list_emails(
        self, user_id: str, status: str | None = None, limit: int = 20
    ) -> dict[str, Any]:
        """List drafts, scheduled, or sent history (by status), up to limit."""
        index, store = self._source_for(status)
        total = await index.count(user_id)
        emails = await index.resolve(user_id, store, limit)
        if status:
            emails = [e for e in emails if e.get("status") == status]
        return {"emails": emails, "count": len(emails), "total_emails": total}

    async def get_email(self, user_id: str, email_id: str) -> dict[str, Any]:
        """Look up a sent email, draft or scheduled email by ID."""
        email = None
        for store in (self.emails, self.drafts, self.scheduled):
            email = await store.load(email_id)
            if email is not None:
                break
        if email is None:
            raise ResourceNotFoundException("email", email_id)
        if str(email.get("user_id")) != str(user_id):
            raise AuthorizationException(resource="email")
        return email
