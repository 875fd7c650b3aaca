"""Tests for Settings validation and environment loading."""

import logging

import pytest
from pydantic import ValidationError

from assistant.core.config import Settings, get_settings
from assistant.shared.logging import CACHE_LOGGER, setup_logging


def test_defaults() -> None:
    settings = Settings()
    assert settings.redis_url.startswith("redis://")
    assert settings.cache_default_ttl == 3600
    assert settings.email_rate_limit_per_hour == 50
    assert settings.user_id_header == "X-User-ID"


@pytest.mark.parametrize("url", ["redis://cache:6379/1", "rediss://secure:6380/0", "unix:///tmp/redis.sock"])
def test_accepts_redis_url_schemes(url: str) -> None:
    assert Settings(redis_url=url).redis_url == url


def test_rejects_bad_url_scheme() -> None:
    with pytest.raises(ValidationError, match="REDIS_URL must start with"):
        Settings(redis_url="http://localhost:6379")


@pytest.mark.parametrize(
    "field",
    ["redis_connect_timeout", "redis_socket_timeout", "redis_reconnect_max_attempts", "redis_reconnect_max_delay"],
)
def test_rejects_negative_values(field: str) -> None:
    with pytest.raises(ValidationError, match=field.upper()):
        Settings(**{field: -1})


def test_rejects_unknown_cache_log_level() -> None:
    with pytest.raises(ValidationError, match="CACHE_LOG_LEVEL"):
        Settings(cache_log_level="loud")


def test_cache_log_level_applied() -> None:
    logger = logging.getLogger(CACHE_LOGGER)
    previous = logger.level
    try:
        setup_logging(Settings(cache_log_level="warning"))
        assert logger.level == logging.WARNING
    finally:
        logger.setLevel(previous)


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REDIS_URL", "redis://other:6379/2")
    monkeypatch.setenv("CHAT_RATE_LIMIT_PER_MINUTE", "5")
    get_settings.cache_clear()
    try:
        settings = get_settings()
        assert settings.redis_url == "redis://other:6379/2"
        assert settings.chat_rate_limit_per_minute == 5
    finally:
        get_settings.cache_clear()
