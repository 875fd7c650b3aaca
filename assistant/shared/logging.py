"""Logging setup: one stdout handler on the root logger.

Cache diagnostics (HIT/MISS/SET lines at DEBUG, degradation warnings and
errors) are emitted under the assistant.infrastructure.cache namespace and
can be tuned separately with CACHE_LOG_LEVEL.
"""

import logging
import sys

from assistant.core.config import Settings, get_settings

CACHE_LOGGER = "assistant.infrastructure.cache"


def setup_logging(settings: Settings | None = None) -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise INFO. The cache
    namespace follows settings.cache_log_level when set. redis-py's own
    logger is capped at WARNING.
    """
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    if settings.cache_log_level:
        logging.getLogger(CACHE_LOGGER).setLevel(settings.cache_log_level.upper())
    logging.getLogger("redis").setLevel(logging.WARNING)
