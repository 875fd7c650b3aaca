"""
UTC datetime utilities for consistent timezone handling.

All datetime values stored in the cache are timezone-aware UTC ISO strings.
"""

from datetime import UTC, datetime, timedelta


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Use this instead of datetime.now() (naive) or datetime.utcnow()
    (naive, deprecated in Python 3.12).
    """
    return datetime.now(UTC)


def utc_now_iso(offset: timedelta | None = None) -> str:
    """Return utc_now() (plus optional offset) as an ISO 8601 string."""
    now = utc_now()
    if offset is not None:
        now = now + offset
    return now.isoformat()


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_iso(value: str | None) -> datetime | None:
    """Parse a stored ISO 8601 string back to an aware UTC datetime."""
    if not value:
        return None
    return as_utc(datetime.fromisoformat(value))
