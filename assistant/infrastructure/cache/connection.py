"""Connection state machine and reconnect policy for the cache client.

The state is an explicit value owned by KeyValueCache and read through
KeyValueCache.connection_state(); transitions happen only inside the
cache (connect, operation failure, supervisor, shutdown).

    DISCONNECTED -> CONNECTING -> READY          handshake ok
    CONNECTING   -> ERROR -> DISCONNECTED        handshake failed
    READY        -> ERROR -> DISCONNECTED        I/O error during an operation
    any          -> DISCONNECTED                 shutdown
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ConnectionState(str, Enum):
    """Lifecycle of the cache connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class ReconnectPolicy:
    """Bounded reconnect schedule used by the cache supervisor task.

    Attempts are numbered from 1. The delay before attempt n is
    min(n * base_delay, max_delay). The budget is spent once either
    max_attempts attempts have been made or max_total_seconds have elapsed
    since the connection was lost.

    Attributes:
        max_attempts: Maximum reconnect attempts before giving up.
        max_total_seconds: Maximum wall time spent reconnecting.
        base_delay: Linear backoff step in seconds.
        max_delay: Upper bound on a single delay in seconds.
    """

    max_attempts: int = 10
    max_total_seconds: float = 3600.0
    base_delay: float = 0.1
    max_delay: float = 3.0

    def delay(self, attempt: int) -> float:
        """Seconds to wait before the given attempt (1-based)."""
        return min(max(attempt, 0) * self.base_delay, self.max_delay)

    def exhausted(self, attempt: int, elapsed: float) -> bool:
        """Return True if attempt (1-based, not yet made) exceeds the budget."""
        return attempt > self.max_attempts or elapsed > self.max_total_seconds

    @classmethod
    def from_settings(cls, settings) -> ReconnectPolicy:
        """Build policy from Settings (redis_reconnect_* fields)."""
        return cls(
            max_attempts=settings.redis_reconnect_max_attempts,
            max_total_seconds=settings.redis_reconnect_max_seconds,
            base_delay=settings.redis_reconnect_base_delay,
            max_delay=settings.redis_reconnect_max_delay,
        )
