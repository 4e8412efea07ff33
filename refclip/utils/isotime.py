"""ISO-8601 timestamp helpers for the project file.

Timestamps are kept as timezone-aware UTC datetimes in memory and written as
``2025-11-11T10:30:00.123456Z``. Parsing also accepts offsets, the trailing
``Z`` produced by JavaScript's ``toISOString`` and date-only strings
(``2025-11-15``, read as UTC midnight). Naive datetimes are taken as UTC.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

__all__ = ["utcnow", "to_iso", "parse_iso", "as_utc"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_iso(dt: datetime) -> str:
    text = as_utc(dt).isoformat()
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


def parse_iso(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 string; return None for anything unparseable."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return as_utc(datetime.fromisoformat(text))
    except (ValueError, OverflowError):  # offsets can push edge dates out of range
        return None
