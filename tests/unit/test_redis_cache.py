"""KeyValueCache operations against FakeRedis: round-trips, deletes, counters, sets."""

import asyncio
import logging

import pytest

from assistant.infrastructure.cache import ConnectionState, KeyValueCache
from tests.fakes import FakeRedis


async def test_connect_sets_ready(cache: KeyValueCache) -> None:
    """connect() over a healthy client ends in READY and is_available()."""
    assert cache.connection_state() is ConnectionState.READY
    assert cache.is_available()


@pytest.mark.parametrize(
    "value",
    [
        {"status": "placed", "items": [{"name": "Pizza", "qty": 2}]},
        [1, 2, 3],
        42,
        3.5,
        True,
        {"nested": {"empty": [], "none": None}},
    ],
)
async def test_structured_values_round_trip(cache: KeyValueCache, value) -> None:
    """set then get returns a value equal to what was stored."""
    assert await cache.set("k", value, ttl=60)
    assert await cache.get("k") == value


@pytest.mark.parametrize("value", ["hello world", "42", "true", "null", '"quoted"', "[1, 2]"])
async def test_plain_strings_round_trip_as_strings(cache: KeyValueCache, value: str) -> None:
    """Strings come back as the same string, even when they look like JSON."""
    assert await cache.set("s", value, ttl=60)
    assert await cache.get("s") == value


async def test_plain_string_stored_raw(cache: KeyValueCache, fake_redis: FakeRedis) -> None:
    """Non-JSON strings are stored unencoded so other readers see the raw text."""
    await cache.set("greeting", "ok", ttl=60)
    assert await fake_redis.get("greeting") == "ok"


async def test_get_returns_raw_string_when_not_json(
    cache: KeyValueCache, fake_redis: FakeRedis
) -> None:
    """Values written by other clients that are not JSON are returned unparsed."""
    fake_redis.raw_set("legacy", "{not json")
    assert await cache.get("legacy") == "{not json"


async def test_get_missing_key_returns_none(cache: KeyValueCache) -> None:
    assert await cache.get("never-written") is None


async def test_set_uses_default_ttl(cache: KeyValueCache, fake_redis: FakeRedis) -> None:
    """Without ttl the default (3600s) applies."""
    await cache.set("k", {"a": 1})
    assert 3590 <= await fake_redis.ttl("k") <= 3600


async def test_set_with_zero_ttl_is_persistent(cache: KeyValueCache) -> None:
    await cache.set("k", {"a": 1}, ttl=0)
    assert await cache.ttl("k") == -1


async def test_entry_expires_after_ttl(cache: KeyValueCache, fake_redis: FakeRedis) -> None:
    await cache.set("k", "v", ttl=10)
    fake_redis.advance(11)
    assert await cache.get("k") is None


async def test_set_unserializable_value_returns_false(
    cache: KeyValueCache, caplog: pytest.LogCaptureFixture
) -> None:
    """Serialization failure is logged at error level and reported as False."""
    with caplog.at_level(logging.ERROR):
        assert await cache.set("k", {"bad": object()}, ttl=60) is False
    assert "serialization error" in caplog.text
    assert await cache.get("k") is None


async def test_order_round_trip_and_delete(cache: KeyValueCache) -> None:
    """set order:o1, read it back, delete it, then it is gone."""
    assert await cache.set("order:o1", {"status": "placed"}, 86400)
    assert await cache.get("order:o1") == {"status": "placed"}
    assert await cache.delete("order:o1") is True
    assert await cache.get("order:o1") is None


async def test_delete_missing_key_returns_false(cache: KeyValueCache) -> None:
    assert await cache.delete("nope") is False


async def test_wildcard_delete_removes_prefix(cache: KeyValueCache) -> None:
    """delete('tasks:u1:*') removes every page for u1, leaves other users alone."""
    await cache.set("tasks:u1:abc:1:10", {"tasks": []}, ttl=300)
    await cache.set("tasks:u1:def:2:10", {"tasks": []}, ttl=300)
    await cache.set("tasks:u2:abc:1:10", {"tasks": []}, ttl=300)

    assert await cache.delete("tasks:u1:*") is True
    assert await cache.get("tasks:u1:abc:1:10") is None
    assert await cache.get("tasks:u1:def:2:10") is None
    assert await cache.get("tasks:u2:abc:1:10") == {"tasks": []}
    assert await cache.delete("tasks:u1:*") is False


async def test_wildcard_delete_handles_many_keys(
    cache: KeyValueCache, fake_redis: FakeRedis
) -> None:
    """Keys beyond one UNLINK batch are all removed."""
    for i in range(1200):
        await cache.set(f"bulk:u1:{i}", i, ttl=60)
    assert await cache.delete("bulk:u1:*") is True
    assert fake_redis.keys() == []


async def test_exists_expire_ttl(cache: KeyValueCache) -> None:
    assert await cache.exists("k") is False
    assert await cache.expire("k", 30) is False
    assert await cache.ttl("k") == -2

    await cache.set("k", "v", ttl=0)
    assert await cache.exists("k") is True
    assert await cache.expire("k", 30) is True
    assert 0 < await cache.ttl("k") <= 30


async def test_increment_and_read_back_as_int(cache: KeyValueCache) -> None:
    assert await cache.increment("counter") == 1
    assert await cache.increment("counter", 5) == 6
    assert await cache.get("counter") == 6


async def test_increment_non_integer_returns_none(
    cache: KeyValueCache, caplog: pytest.LogCaptureFixture
) -> None:
    """Store-level error is logged and converted to None."""
    await cache.set("k", {"a": 1}, ttl=60)
    with caplog.at_level(logging.ERROR):
        assert await cache.increment("k") is None
    assert "INCR" in caplog.text
    assert cache.is_available()


async def test_non_utf8_values_degrade_to_defaults(
    cache: KeyValueCache, fake_redis: FakeRedis, caplog: pytest.LogCaptureFixture
) -> None:
    """Stored bytes that fail strict UTF-8 decoding are logged, never raised."""
    fake_redis.raw_set("blob", b"\xff\xfe")
    fake_redis.raw_set(b"user:\xff", "x")
    fake_redis.raw_sadd("tags", b"\xff")
    with caplog.at_level(logging.ERROR):
        assert await cache.get("blob") is None
        assert await cache.delete("user:*") is False
        assert await cache.set_members("tags") == set()
    assert "GET" in caplog.text
    assert "SMEMBERS" in caplog.text
    assert cache.is_available()
    assert await cache.set("ok", 1) is True


async def test_concurrent_increments_are_atomic(cache: KeyValueCache) -> None:
    """n concurrent increments leave the counter at exactly n."""
    n = 200
    results = await asyncio.gather(*(cache.increment("hits") for _ in range(n)))
    assert await cache.get("hits") == n
    assert sorted(results) == list(range(1, n + 1))


async def test_set_helpers(cache: KeyValueCache) -> None:
    """Duplicate members are no-ops; remove reports whether anything changed."""
    assert await cache.set_add("online", "a", "b") is True
    assert await cache.set_add("online", "a") is False
    assert await cache.set_members("online") == {"a", "b"}
    assert await cache.set_remove("online", "a") is True
    assert await cache.set_remove("online", "zzz") is False
    assert await cache.set_members("online") == {"b"}
    assert await cache.set_add("online") is False
    assert await cache.set_members("missing") == set()


async def test_flush_all_clears_and_logs(
    cache: KeyValueCache, caplog: pytest.LogCaptureFixture
) -> None:
    await cache.set("a", 1, ttl=60)
    await cache.set("b", 2, ttl=60)
    with caplog.at_level(logging.WARNING):
        assert await cache.flush_all() is True
    assert "FLUSHALL" in caplog.text
    assert await cache.get("a") is None


async def test_stats_when_connected(cache: KeyValueCache) -> None:
    await cache.set("a", 1, ttl=60)
    stats = await cache.stats()
    assert stats["connected"] is True
    assert stats["state"] == "ready"
    assert "used_memory" in stats["memory"]
    assert stats["keyspace"]["db0"]["keys"] == 1


async def test_injected_logger_receives_diagnostics(fake_redis: FakeRedis) -> None:
    """Errors go to the logger passed in, not the module logger."""
    records: list[logging.LogRecord] = []

    class _Collect(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            records.append(record)

    injected = logging.getLogger("tests.injected_cache_logger")
    injected.addHandler(_Collect())
    injected.setLevel(logging.DEBUG)
    kv = KeyValueCache(client=fake_redis, logger=injected)
    await kv.connect()
    await kv.set("k", {"bad": object()})
    await kv.shutdown()
    assert any(r.levelno == logging.ERROR and "k" in r.getMessage() for r in records)
