"""Shared utility functions."""

from __future__ import annotations

import re
from datetime import datetime, timezone

_HHMM_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def utc_now() -> datetime:
    """Return aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Normalize datetime to UTC timezone."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def is_hhmm(value: str) -> bool:
    """Return True for zero-padded 24-hour ``HH:MM`` strings."""
    return bool(_HHMM_PATTERN.match(value))
