"""Primitive checks shared by the entity validators.

All checks are total: they accept any decoded JSON value and never raise.
"""

from __future__ import annotations

import math
from typing import Any
from urllib.parse import urlparse


def is_number(value: Any) -> bool:
    """Finite int or float. JSON can decode 1e400 to inf and huge integer literals."""
    # bool is an int subclass but never a valid numeric field
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:  # int too large for a float
        return False


def non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def optional_non_empty_str(d: dict, key: str) -> bool:
    """Absent (or None) is fine; present must be a non-blank string."""
    value = d.get(key)
    return value is None or non_empty_str(value)


def optional_str(d: dict, key: str) -> bool:
    value = d.get(key)
    return value is None or isinstance(value, str)


def optional_bool(d: dict, key: str) -> bool:
    value = d.get(key)
    return value is None or isinstance(value, bool)


def is_valid_url(value: Any) -> bool:
    """Syntactic URL check: a scheme plus a location (``file:///C:/x.mp4`` counts)."""
    if not non_empty_str(value):
        return False
    text = value.strip()
    if any(ch.isspace() for ch in text):
        return False
    try:
        parts = urlparse(text)
    except ValueError:
        return False
    if not parts.scheme or not parts.scheme[0].isalpha():
        return False
    if parts.scheme == "file":
        return bool(parts.path)
    return bool(parts.netloc or parts.path)
