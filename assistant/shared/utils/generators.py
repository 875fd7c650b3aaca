"""ID generators (CUID2-based entity identifiers)."""

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_id(kind: str) -> str:
    """Return an entity ID of the form {kind}_{cuid} (e.g. order_k2x...).

    The result never contains the cache key separator, so it can be used
    directly as a key component.
    """
    return f"{kind}_{generate_cuid()}"
