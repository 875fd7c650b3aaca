"""Productivity assistant backend with a fault-tolerant Redis cache layer."""

__version__ = "1.0.0"
