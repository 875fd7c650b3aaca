"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Cache connection and reconnect settings are validated
at load time.
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_REDIS_URL_SCHEMES = ("redis://", "rediss://", "unix://")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings have defaults; validate_cache_settings rejects malformed
    Redis URLs and negative timeouts or retry budgets.
    """

    # App
    app_name: str = "assistant"
    app_version: str = "1.0.0"
    debug: bool = False
    # Overrides the level of assistant.infrastructure.cache loggers (e.g. "WARNING")
    cache_log_level: str | None = None

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Request
    user_id_header: str = "X-User-ID"

    # Redis cache
    redis_enabled: bool = True
    redis_url: str = "redis://localhost:6379/0"
    redis_connect_timeout: float = 10.0
    redis_socket_timeout: float = 5.0
    # Reconnect policy: delay before attempt n is min(n * base, max)
    redis_reconnect_max_attempts: int = 10
    redis_reconnect_max_seconds: float = 3600.0
    redis_reconnect_base_delay: float = 0.1
    redis_reconnect_max_delay: float = 3.0
    cache_default_ttl: int = 3600

    # Rate limits (fixed window)
    email_rate_limit_per_hour: int = 50
    chat_rate_limit_per_minute: int = 30
    socket_rate_limit_per_minute: int = 20

    # Simulated order progression delays (seconds)
    order_confirm_delay_seconds: float = 120.0
    order_prepare_delay_seconds: float = 480.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @model_validator(mode="after")
    def validate_cache_settings(self) -> "Settings":
        """Validate Redis URL scheme and non-negative timeouts / retry budget."""
        if not self.redis_url.startswith(_REDIS_URL_SCHEMES):
            raise ValueError(
                f"REDIS_URL must start with one of {', '.join(_REDIS_URL_SCHEMES)}; "
                f"got: {self.redis_url!r}"
            )
        for name in (
            "redis_connect_timeout",
            "redis_socket_timeout",
            "redis_reconnect_max_attempts",
            "redis_reconnect_max_seconds",
            "redis_reconnect_base_delay",
            "redis_reconnect_max_delay",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name.upper()} must be >= 0")
        if self.cache_log_level and self.cache_log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"CACHE_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
