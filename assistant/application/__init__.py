"""Application layer: services composed from cache usage patterns."""
