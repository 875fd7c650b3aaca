"""Tests for the fixed-window RateLimiter."""

import pytest

from assistant.domain.exceptions import RateLimitExceededException
from assistant.infrastructure.cache import KeyValueCache, RateLimiter, RateLimitPolicy
from tests.fakes import FakeRedis


@pytest.fixture
def limiter(cache: KeyValueCache) -> RateLimiter:
    return RateLimiter(cache, RateLimitPolicy(scope="email", limit=3, window_seconds=60))


async def test_allows_up_to_limit_then_rejects(limiter: RateLimiter) -> None:
    """Three hits pass, the fourth in the same window is rejected."""
    results = [await limiter.hit("u1") for _ in range(4)]
    assert [r.allowed for r in results] == [True, True, True, False]
    assert [r.count for r in results] == [1, 2, 3, 4]
    assert results[3].retry_after is not None
    assert 0 < results[3].retry_after <= 60


async def test_window_reset_allows_again(limiter: RateLimiter, fake_redis: FakeRedis) -> None:
    for _ in range(4):
        await limiter.hit("u1")
    fake_redis.advance(61)
    result = await limiter.hit("u1")
    assert result.allowed is True
    assert result.count == 1


async def test_window_not_extended_by_later_hits(
    limiter: RateLimiter, cache: KeyValueCache, fake_redis: FakeRedis
) -> None:
    """The TTL is set on the first hit only; later hits do not push the reset out."""
    await limiter.hit("u1")
    fake_redis.advance(40)
    await limiter.hit("u1")
    assert await cache.ttl("email_rate_limit:u1") <= 20
    fake_redis.advance(21)
    assert await limiter.current("u1") == 0


async def test_actors_are_counted_separately(limiter: RateLimiter) -> None:
    for _ in range(3):
        await limiter.hit("u1")
    assert (await limiter.hit("u2")).allowed is True
    assert (await limiter.hit("u1")).allowed is False


async def test_counter_without_expiry_gets_window(
    limiter: RateLimiter, cache: KeyValueCache, fake_redis: FakeRedis
) -> None:
    """A counter left without a TTL is given one on the next hit."""
    fake_redis.raw_set("email_rate_limit:u1", "1")
    await limiter.hit("u1")
    assert 0 < await cache.ttl("email_rate_limit:u1") <= 60


async def test_enforce_raises_with_retry_after(limiter: RateLimiter) -> None:
    for _ in range(3):
        await limiter.enforce("u1")
    with pytest.raises(RateLimitExceededException) as exc_info:
        await limiter.enforce("u1")
    assert exc_info.value.error_code == "RATE_LIMIT_EXCEEDED"
    assert exc_info.value.details["scope"] == "email"
    assert exc_info.value.details["limit"] == 3
    assert exc_info.value.retry_after is not None


async def test_fails_open_when_cache_unavailable(offline_cache: KeyValueCache) -> None:
    limiter = RateLimiter(offline_cache, RateLimitPolicy(scope="chat", limit=1, window_seconds=60))
    for _ in range(5):
        result = await limiter.enforce("u1")
        assert result.allowed is True
        assert result.count is None


async def test_current_and_reset(limiter: RateLimiter) -> None:
    await limiter.hit("u1")
    await limiter.hit("u1")
    assert await limiter.current("u1") == 2
    assert await limiter.reset("u1") is True
    assert await limiter.current("u1") == 0
