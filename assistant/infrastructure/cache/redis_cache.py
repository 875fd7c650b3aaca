"""Redis-backed key-value cache with safe defaults.

KeyValueCache wraps a single long-lived redis.asyncio client. Every
operation checks availability first and converts every store failure into
the operation's documented safe default (None / False / -1 / empty set);
nothing here raises to callers. The cache is an optimization, never a
dependency: when Redis is down the application keeps serving requests.

Also provides cached(), read-through caching for service methods.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

import redis.asyncio as redis

from assistant.core.constants import CACHE_KEY_SEP, CACHE_WILDCARD
from assistant.infrastructure.cache.connection import ConnectionState, ReconnectPolicy
from assistant.infrastructure.cache.keys import has_reserved_chars

T = TypeVar("T")

_DELETE_CHUNK_SIZE = 500


def _encode(value: Any) -> str:
    """Serialize value for storage.

    Non-strings are JSON-encoded. Plain strings are stored raw unless they
    would themselves parse as JSON (e.g. "42", "true"), in which case they
    are JSON-encoded so get() returns the original string.

    Raises:
        TypeError, ValueError: If value is not JSON-serializable.
    """
    if isinstance(value, str):
        try:
            json.loads(value)
        except ValueError:
            return value
        return json.dumps(value)
    return json.dumps(value)


def _decode(raw: str) -> Any:
    """Parse a stored value; fall back to the raw string if it is not JSON."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


class KeyValueCache:
    """Async Redis key-value cache; every operation degrades to a safe default.

    Constructed explicitly by the composition root (assistant.core.lifespan)
    and injected where needed. Owns its client handle exclusively; callers
    never touch Redis directly. Call connect() at startup and shutdown() at
    process termination.

    Connection state is an explicit ConnectionState value. A connection or
    timeout error during an operation moves READY -> ERROR -> DISCONNECTED
    and starts a single supervisor task that reconnects per ReconnectPolicy;
    once the policy is exhausted the cache stays DISCONNECTED until restart.
    """

    def __init__(
        self,
        url: str | None = None,
        *,
        client: redis.Redis | None = None,
        policy: ReconnectPolicy | None = None,
        logger: logging.Logger | None = None,
        connect_timeout: float = 10.0,
        socket_timeout: float = 5.0,
        default_ttl: int = 3600,
    ) -> None:
        """Initialize cache (no I/O until connect()).

        Args:
            url: Redis URL (redis://, rediss://, unix://). Ignored if client is given.
            client: Optional pre-built client (tests, DI).
            policy: Reconnect policy; defaults to ReconnectPolicy().
            logger: Logger for diagnostics; defaults to this module's logger.
            connect_timeout: Bound on the connection handshake in seconds.
            socket_timeout: Per-operation socket timeout in seconds.
            default_ttl: TTL used by set() when none is given.
        """
        self._url = url
        self._client = client
        self._policy = policy or ReconnectPolicy()
        self._logger = logger or logging.getLogger(__name__)
        self._connect_timeout = connect_timeout
        self._socket_timeout = socket_timeout
        self.default_ttl = default_ttl
        self._state = ConnectionState.DISCONNECTED
        self._supervisor: asyncio.Task[None] | None = None
        self._closed = False
        self._exhausted = False

    @classmethod
    def from_settings(cls, settings, logger: logging.Logger | None = None) -> KeyValueCache:
        """Build an unconnected cache from Settings."""
        return cls(
            settings.redis_url,
            policy=ReconnectPolicy.from_settings(settings),
            logger=logger,
            connect_timeout=settings.redis_connect_timeout,
            socket_timeout=settings.redis_socket_timeout,
            default_ttl=settings.cache_default_ttl,
        )

    # ---- Connection lifecycle ----

    def connection_state(self) -> ConnectionState:
        """Return the current connection state."""
        return self._state

    def is_available(self) -> bool:
        """Return True if a client exists and the last transition was to READY."""
        return self._client is not None and self._state is ConnectionState.READY

    @property
    def reconnect_exhausted(self) -> bool:
        """True once the reconnect budget is spent; the cache is then a no-op."""
        return self._exhausted

    async def connect(self) -> bool:
        """Create the client if needed and perform the handshake.

        On failure the supervisor is started and False is returned; the
        application continues without cache. Never raises.
        """
        if self._closed:
            return False
        if self._client is None:
            if not self._url:
                self._logger.warning("Redis URL not configured. Cache disabled.")
                return False
            self._client = redis.from_url(
                self._url,
                decode_responses=True,
                socket_connect_timeout=self._connect_timeout,
                socket_timeout=self._socket_timeout,
                socket_keepalive=True,
            )
        if await self._handshake():
            return True
        self._start_supervisor()
        return False

    async def _handshake(self) -> bool:
        """PING the store: CONNECTING -> READY, or CONNECTING -> ERROR -> DISCONNECTED."""
        client = self._client
        if client is None or self._closed:
            return False
        self._state = ConnectionState.CONNECTING
        try:
            await asyncio.wait_for(client.ping(), timeout=self._connect_timeout)
        except (redis.RedisError, OSError, TimeoutError) as e:
            self._state = ConnectionState.ERROR
            self._logger.warning("Redis connection failed: %s. Continuing without cache.", e)
            self._state = ConnectionState.DISCONNECTED
            return False
        if self._closed:
            return False
        self._state = ConnectionState.READY
        self._logger.info("Redis connected and ready")
        return True

    def _start_supervisor(self) -> None:
        """Start the reconnect task unless closed, exhausted, or already running."""
        if self._closed or self._exhausted:
            return
        if self._supervisor is not None and not self._supervisor.done():
            return
        self._supervisor = asyncio.create_task(self._supervise())

    async def _supervise(self) -> None:
        """Reconnect loop driven by ReconnectPolicy."""
        loop = asyncio.get_running_loop()
        started = loop.time()
        attempt = 1
        while not self._closed:
            elapsed = loop.time() - started
            if self._policy.exhausted(attempt, elapsed):
                self._exhausted = True
                self._state = ConnectionState.DISCONNECTED
                self._logger.error(
                    "Redis reconnect budget exhausted after %s attempts (%.1fs). "
                    "Cache disabled until restart.",
                    attempt - 1,
                    elapsed,
                )
                return
            await asyncio.sleep(self._policy.delay(attempt))
            self._logger.info(
                "Redis reconnecting (attempt %s/%s)", attempt, self._policy.max_attempts
            )
            if await self._handshake():
                return
            attempt += 1

    def _mark_connection_lost(self) -> None:
        """READY -> ERROR -> DISCONNECTED, then hand over to the supervisor."""
        if self._state is not ConnectionState.READY:
            return
        self._state = ConnectionState.ERROR
        self._state = ConnectionState.DISCONNECTED
        self._logger.warning("Redis connection closed")
        self._start_supervisor()

    async def shutdown(self) -> None:
        """Close the connection gracefully; any state -> DISCONNECTED. Idempotent."""
        self._closed = True
        supervisor = self._supervisor
        self._supervisor = None
        if supervisor is not None and not supervisor.done():
            supervisor.cancel()
            try:
                await supervisor
            except asyncio.CancelledError:
                pass
        client = self._client
        self._client = None
        self._state = ConnectionState.DISCONNECTED
        if client is not None:
            try:
                await client.aclose()
                self._logger.info("Redis connection closed gracefully")
            except (redis.RedisError, OSError) as e:
                self._logger.error("Error closing Redis connection: %s", e)

    # ---- Operation plumbing ----

    def _unavailable(self, op: str, key: str | None, default: T) -> T:
        self._logger.debug("Redis not available for %s operation (key=%s)", op, key)
        return default

    async def _execute(
        self,
        op: str,
        key: str | None,
        default: T,
        call: Callable[[redis.Redis], Awaitable[T]],
    ) -> T:
        """Run call against the client; convert any store failure into default."""
        client = self._client
        if client is None or not self.is_available():
            return self._unavailable(op, key, default)
        try:
            return await call(client)
        except (redis.ConnectionError, redis.TimeoutError) as e:
            self._logger.error("Cache %s error for key %r: %s", op, key, e)
            self._mark_connection_lost()
            return default
        except (redis.RedisError, UnicodeDecodeError) as e:
            # UnicodeDecodeError: a stored value is not UTF-8 (decode_responses=True)
            self._logger.error("Cache %s error for key %r: %s", op, key, e)
            return default

    # ---- Operations ----

    async def get(self, key: str) -> Any | None:
        """Return cached value (JSON-parsed when possible) or None.

        Args:
            key: Cache key (use assistant.infrastructure.cache.keys builders).

        Returns:
            Parsed structure, the raw string if not JSON, or None on miss,
            unavailability or error.
        """
        raw = await self._execute("GET", key, None, lambda c: c.get(key))
        if raw is None:
            self._logger.debug("Cache MISS: %s", key)
            return None
        self._logger.debug("Cache HIT: %s", key)
        return _decode(raw)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store value; expiring when ttl > 0, persistent otherwise.

        Args:
            key: Cache key.
            value: JSON-serializable value or string.
            ttl: Time-to-live in seconds; None uses default_ttl, 0 means no expiry.

        Returns:
            True if stored, False otherwise.
        """
        if not self.is_available():
            return self._unavailable("SET", key, False)
        ttl = self.default_ttl if ttl is None else ttl
        try:
            payload = _encode(value)
        except (TypeError, ValueError) as e:
            self._logger.error("Cache SET serialization error for key %r: %s", key, e)
            return False

        async def call(client: redis.Redis) -> bool:
            if ttl > 0:
                await client.setex(key, ttl, payload)
            else:
                await client.set(key, payload)
            return True

        stored = await self._execute("SET", key, False, call)
        if stored:
            self._logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
        return stored

    async def delete(self, key: str) -> bool:
        """Remove a key, or every key matching a wildcard pattern.

        A key containing '*' is treated as a SCAN match pattern; matching
        keys are collected and UNLINKed in batches.

        Returns:
            True iff at least one key was removed.
        """
        if CACHE_WILDCARD in key:
            return await self._delete_pattern(key) > 0
        deleted = await self._execute("DEL", key, 0, lambda c: c.delete(key))
        self._logger.debug("Cache DELETE: %s (%s keys)", key, deleted)
        return deleted > 0

    async def _delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching pattern using SCAN + batched UNLINK (non-blocking)."""

        async def call(client: redis.Redis) -> int:
            deleted = 0
            chunk: list[str] = []
            async for key in client.scan_iter(match=pattern):
                chunk.append(key)
                if len(chunk) >= _DELETE_CHUNK_SIZE:
                    deleted += int(await client.unlink(*chunk) or 0)
                    chunk = []
            if chunk:
                deleted += int(await client.unlink(*chunk) or 0)
            return deleted

        deleted = await self._execute("DEL", pattern, 0, call)
        if deleted > 0:
            self._logger.info("Cache INVALIDATE: %s (%s keys)", pattern, deleted)
        return deleted

    async def exists(self, key: str) -> bool:
        """Return True if key exists."""
        count = await self._execute("EXISTS", key, 0, lambda c: c.exists(key))
        return count > 0

    async def expire(self, key: str, seconds: int) -> bool:
        """Set a TTL on an existing key. False if key missing or on failure."""

        async def call(client: redis.Redis) -> bool:
            return bool(await client.expire(key, seconds))

        return await self._execute("EXPIRE", key, False, call)

    async def ttl(self, key: str) -> int:
        """Return remaining TTL in seconds, or -1 when unavailable/unknown.

        Store values pass through: -1 also means no expiry, -2 means missing.
        """

        async def call(client: redis.Redis) -> int:
            return int(await client.ttl(key))

        return await self._execute("TTL", key, -1, call)

    async def increment(self, key: str, amount: int = 1) -> int | None:
        """Atomically increment an integer counter at the store.

        Returns:
            New value, or None if unavailable or the stored value is not an integer.
        """

        async def call(client: redis.Redis) -> int:
            if amount == 1:
                return int(await client.incr(key))
            return int(await client.incrby(key, amount))

        return await self._execute("INCR", key, None, call)

    async def set_add(self, key: str, *members: str) -> bool:
        """Add members to a set. True iff at least one new member was added."""
        if not members:
            return False
        added = await self._execute("SADD", key, 0, lambda c: c.sadd(key, *members))
        return added > 0

    async def set_members(self, key: str) -> set[str]:
        """Return all members of a set (empty when unavailable or missing)."""

        async def call(client: redis.Redis) -> set[str]:
            return set(await client.smembers(key))

        return await self._execute("SMEMBERS", key, set(), call)

    async def set_remove(self, key: str, *members: str) -> bool:
        """Remove members from a set. True iff at least one member was removed."""
        if not members:
            return False
        removed = await self._execute("SREM", key, 0, lambda c: c.srem(key, *members))
        return removed > 0

    async def flush_all(self) -> bool:
        """Clear the entire store. Administrative use only.

        Returns:
            True if cleared, False otherwise.
        """
        self._logger.warning("Cache FLUSHALL requested")

        async def call(client: redis.Redis) -> bool:
            await client.flushall()
            return True

        cleared = await self._execute("FLUSHALL", None, False, call)
        if cleared:
            self._logger.warning("Cache CLEARED: all keys deleted")
        return cleared

    async def stats(self) -> dict[str, Any]:
        """Best-effort introspection for health checks.

        Returns:
            {"connected": False, "state": ...} when unavailable, otherwise
            also "memory" and "keyspace" INFO sections.
        """

        async def call(client: redis.Redis) -> dict[str, Any]:
            memory = await client.info("memory")
            keyspace = await client.info("keyspace")
            return {
                "connected": True,
                "state": self._state.value,
                "memory": memory,
                "keyspace": keyspace,
            }

        result = await self._execute("INFO", None, None, call)
        if result is None:
            return {"connected": False, "state": self._state.value}
        return result


def _call_key(
    key_prefix: str, signature: inspect.Signature, args: tuple[Any, ...], kwargs: dict[str, Any]
) -> str | None:
    """menu:rest_002, restaurants:cuisine=italian; None when an argument is unusable.

    Required arguments contribute their value, optional ones name=value;
    None arguments are left out so omitted and explicit-None calls share a key.
    """
    bound = signature.bind(*args, **kwargs)
    parts: list[str] = []
    for name, value in list(bound.arguments.items())[1:]:
        if value is None:
            continue
        has_default = signature.parameters[name].default is not inspect.Parameter.empty
        part = f"{name}={value}" if has_default else str(value)
        if not part or has_reserved_chars(part):
            return None
        parts.append(part)
    return CACHE_KEY_SEP.join([key_prefix, *parts])


def cached(key_prefix: str, ttl: int = 300) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Read-through caching for async methods of a service holding `self.cache`.

    Used for the restaurant catalog (OrderService.list_restaurants and
    get_menu). None results are not stored, so unknown lookups are retried.
    Arguments containing the key separator or glob characters skip the
    cache and go straight to the method.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        signature = inspect.signature(func)

        @wraps(func)
        async def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            cache: KeyValueCache = self.cache
            cache_key = _call_key(key_prefix, signature, (self, *args), kwargs)
            if cache_key is None:
                return await func(self, *args, **kwargs)
            hit = await cache.get(cache_key)
            if hit is not None:
                return hit
            result = await func(self, *args, **kwargs)
            if result is not None:
                await cache.set(cache_key, result, ttl=ttl)
            return result

        return wrapper

    return decorator
