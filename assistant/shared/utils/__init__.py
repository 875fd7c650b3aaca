"""Shared utility helpers."""

from assistant.shared.utils.datetime import as_utc, parse_iso, utc_now, utc_now_iso
from assistant.shared.utils.generators import generate_cuid, generate_id

__all__ = ["as_utc", "generate_cuid", "generate_id", "parse_iso", "utc_now", "utc_now_iso"]
