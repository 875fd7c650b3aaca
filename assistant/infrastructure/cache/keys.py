"""Cache key builders. Single place for key format (DRY).

Key components (actor IDs, entity IDs, scopes) must not contain
CACHE_KEY_SEP or any SCAN glob metacharacter, to avoid ambiguous or
colliding keys and pattern deletes that reach other actors' keys.
"""

from assistant.core.constants import (
    CACHE_GLOB_CHARS,
    CACHE_KEY_SEP,
    CACHE_WILDCARD,
    RATE_LIMIT_SUFFIX,
)

RESERVED_KEY_CHARS = CACHE_KEY_SEP + CACHE_GLOB_CHARS


def has_reserved_chars(value: str) -> bool:
    return any(ch in RESERVED_KEY_CHARS for ch in value)


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value is empty or contains a reserved character.

    Args:
        value: String component used in a cache key.
        name: Name of the component (for error message).

    Raises:
        ValueError: If value is empty or contains CACHE_KEY_SEP or a glob
            metacharacter (* ? [ ] \\).
    """
    if not value:
        raise ValueError(f"Cache key component {name!r} must not be empty")
    if has_reserved_chars(value):
        raise ValueError(
            f"Cache key component {name!r} must not contain any of {RESERVED_KEY_CHARS!r}"
        )


def _validate_key_components(components: list[tuple[str, str]]) -> None:
    """Validate multiple key components; raise on first invalid one."""
    for value, name in components:
        _validate_key_component(value, name)


def entity_key(prefix: str, entity_id: str) -> str:
    """Cache key for a whole entity (e.g. order:{id}, draft:{id})."""
    _validate_key_components([(prefix, "prefix"), (entity_id, "entity_id")])
    return f"{prefix}{CACHE_KEY_SEP}{entity_id}"


def index_list_key(scope: str, actor_id: str) -> str:
    """Cache key for an actor's capped index list (e.g. user_orders:{user})."""
    _validate_key_components([(scope, "scope"), (actor_id, "actor_id")])
    return f"{scope}{CACHE_KEY_SEP}{actor_id}"


def rate_limit_key(scope: str, actor_id: str) -> str:
    """Cache key for a rate-limit counter: {scope}_rate_limit:{actor_id}."""
    _validate_key_components([(scope, "scope"), (actor_id, "actor_id")])
    return f"{scope}{RATE_LIMIT_SUFFIX}{CACHE_KEY_SEP}{actor_id}"


def query_key(scope: str, actor_id: str, digest: str, page: int, page_size: int) -> str:
    """Cache key for one page of a query result."""
    _validate_key_components(
        [(scope, "scope"), (actor_id, "actor_id"), (digest, "digest")]
    )
    return CACHE_KEY_SEP.join(
        [scope, actor_id, digest, str(page), str(page_size)]
    )


def actor_scope_pattern(scope: str, actor_id: str) -> str:
    """Wildcard pattern matching every key of scope for actor: {scope}:{actor}:*."""
    _validate_key_components([(scope, "scope"), (actor_id, "actor_id")])
    return f"{scope}{CACHE_KEY_SEP}{actor_id}{CACHE_KEY_SEP}{CACHE_WILDCARD}"
