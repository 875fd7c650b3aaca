"""In-memory stand-in for the subset of redis.asyncio.Redis used by KeyValueCache.

Single-threaded and deterministic: each command runs to completion after
one scheduler yield, so INCR is atomic just like on a real server. TTLs use
a controllable clock (advance()), and `down = True` makes every command
raise redis.ConnectionError to simulate an outage.
"""

from __future__ import annotations

import asyncio
import fnmatch
import math
import time
from collections.abc import AsyncIterator
from typing import Any

import redis.asyncio as redis


class FakeRedis:
    """Test double for redis.asyncio.Redis (decode_responses=True semantics)."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}
        self._expiry: dict[str, float] = {}
        self._offset = 0.0
        self.down = False
        self.closed = False
        self.ping_calls = 0

    # ---- test controls ----

    def advance(self, seconds: float) -> None:
        """Move the clock forward; keys whose TTL elapsed disappear."""
        self._offset += seconds

    def raw_set(self, key: str | bytes, value: str | bytes) -> None:
        """Write a raw value bypassing the cache wrapper; bytes are decoded on read."""
        self._data[key] = value
        self._expiry.pop(key, None)

    def raw_sadd(self, key: str, *members: str | bytes) -> None:
        self._data.setdefault(key, set()).update(members)

    def keys(self) -> list[str]:
        self._purge()
        return sorted(self._data, key=str)

    # ---- internals ----

    def _now(self) -> float:
        return time.monotonic() + self._offset

    def _purge(self) -> None:
        now = self._now()
        for key in [k for k, at in self._expiry.items() if at <= now]:
            self._data.pop(key, None)
            self._expiry.pop(key, None)

    async def _enter(self) -> None:
        await asyncio.sleep(0)
        if self.down:
            raise redis.ConnectionError("Connection refused (fake)")
        self._purge()

    @staticmethod
    def _reply(value: Any) -> Any:
        # decode_responses=True: replies are decoded as strict UTF-8
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def _set_of(self, key: str) -> set[str]:
        value = self._data.get(key)
        if value is None:
            return set()
        if not isinstance(value, set):
            raise redis.ResponseError("WRONGTYPE Operation against a key holding the wrong kind of value")
        return value

    # ---- commands ----

    async def ping(self) -> bool:
        self.ping_calls += 1
        await self._enter()
        return True

    async def get(self, key: str) -> str | None:
        await self._enter()
        value = self._data.get(key)
        if isinstance(value, set):
            raise redis.ResponseError("WRONGTYPE Operation against a key holding the wrong kind of value")
        return self._reply(value)

    async def set(self, key: str, value: str) -> bool:
        await self._enter()
        self._data[key] = str(value)
        self._expiry.pop(key, None)
        return True

    async def setex(self, key: str, seconds: int, value: str) -> bool:
        await self._enter()
        self._data[key] = str(value)
        self._expiry[key] = self._now() + seconds
        return True

    async def delete(self, *keys: str) -> int:
        await self._enter()
        removed = 0
        for key in keys:
            if key in self._data:
                del self._data[key]
                self._expiry.pop(key, None)
                removed += 1
        return removed

    async def unlink(self, *keys: str) -> int:
        return await self.delete(*keys)

    async def scan_iter(self, match: str | None = None) -> AsyncIterator[str]:
        await self._enter()
        for key in list(self._data):
            name = self._reply(key)
            if match is None or fnmatch.fnmatchcase(name, match):
                yield name

    async def exists(self, *keys: str) -> int:
        await self._enter()
        return sum(1 for key in keys if key in self._data)

    async def expire(self, key: str, seconds: int) -> bool:
        await self._enter()
        if key not in self._data:
            return False
        self._expiry[key] = self._now() + seconds
        return True

    async def ttl(self, key: str) -> int:
        await self._enter()
        if key not in self._data:
            return -2
        if key not in self._expiry:
            return -1
        return max(math.ceil(self._expiry[key] - self._now()), 0)

    async def incr(self, key: str) -> int:
        return await self.incrby(key, 1)

    async def incrby(self, key: str, amount: int) -> int:
        await self._enter()
        current = self._data.get(key, "0")
        try:
            value = int(current) + amount
        except (TypeError, ValueError):
            raise redis.ResponseError("value is not an integer or out of range") from None
        self._data[key] = str(value)
        return value

    async def sadd(self, key: str, *members: str) -> int:
        await self._enter()
        members_set = self._set_of(key)
        before = len(members_set)
        members_set.update(str(m) for m in members)
        self._data[key] = members_set
        return len(members_set) - before

    async def srem(self, key: str, *members: str) -> int:
        await self._enter()
        members_set = self._set_of(key)
        before = len(members_set)
        members_set.difference_update(str(m) for m in members)
        if members_set:
            self._data[key] = members_set
        else:
            self._data.pop(key, None)
        return before - len(members_set)

    async def smembers(self, key: str) -> set[str]:
        await self._enter()
        return {self._reply(m) for m in self._set_of(key)}

    async def flushall(self) -> bool:
        await self._enter()
        self._data.clear()
        self._expiry.clear()
        return True

    async def info(self, section: str | None = None) -> dict[str, Any]:
        await self._enter()
        if section == "memory":
            return {"used_memory": 1024 * len(self._data), "used_memory_human": "1K"}
        if section == "keyspace":
            if not self._data:
                return {}
            return {"db0": {"keys": len(self._data), "expires": len(self._expiry)}}
        return {}

    async def aclose(self) -> None:
        self.closed = True
