"""Shared utilities (logging, ID generation, UTC time)."""
