"""Infrastructure: Redis cache and its usage patterns."""
