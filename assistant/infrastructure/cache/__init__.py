"""Cache: Redis key-value wrapper, key builders and usage patterns.

KeyValueCache is the only component that talks to Redis. The usage
patterns (rate limiter, capped index lists, entity stores, query-result
cache) are built on its operations; key format lives in keys.py (DRY).
"""

from assistant.infrastructure.cache.cache_protocol import CacheProtocol
from assistant.infrastructure.cache.connection import ConnectionState, ReconnectPolicy
from assistant.infrastructure.cache.entity_store import EntityStore
from assistant.infrastructure.cache.index_list import IndexList
from assistant.infrastructure.cache.keys import (
    actor_scope_pattern,
    has_reserved_chars,
    entity_key,
    index_list_key,
    query_key,
    rate_limit_key,
)
from assistant.infrastructure.cache.query_cache import (
    QueryResultCache,
    canonical_filters,
    filters_digest,
)
from assistant.infrastructure.cache.rate_limiter import (
    RateLimiter,
    RateLimitPolicy,
    RateLimitResult,
)
from assistant.infrastructure.cache.redis_cache import KeyValueCache, cached

__all__ = [
    "CacheProtocol",
    "ConnectionState",
    "EntityStore",
    "IndexList",
    "KeyValueCache",
    "QueryResultCache",
    "RateLimitPolicy",
    "RateLimitResult",
    "RateLimiter",
    "ReconnectPolicy",
    "actor_scope_pattern",
    "cached",
    "canonical_filters",
    "entity_key",
    "filters_digest",
    "has_reserved_chars",
    "index_list_key",
    "query_key",
    "rate_limit_key",
]
