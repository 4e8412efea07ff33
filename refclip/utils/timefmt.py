"""Time formatting utilities.

Two fixed-precision clock formats are used across the app:
 - `format_timestamp` renders hh:mm:ss.cc for clip lists and mark read-outs.
 - `format_time` renders mm:ss.mmm for status bar labels.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

__all__ = ["format_time", "format_timestamp", "DEFAULT_PLACEHOLDER"]

DEFAULT_PLACEHOLDER = "--:--:--"


def _to_units(seconds: float, per_second: int) -> int:
    # Decimal(str(x)) avoids binary float artefacts such as 0.29 * 100 == 28.999...
    return int(
        (Decimal(str(seconds)) * Decimal(per_second)).to_integral_value(
            rounding=ROUND_HALF_UP
        )
    )


def format_time(seconds: float) -> str:
    """Return a human-friendly timestamp mm:ss.mmm for UI labels.

    Uses ROUND_HALF_UP semantics for milliseconds to avoid Python's bankers rounding
    edge cases (e.g., 1.2345 -> 1.235). Accepts negative (clamps display to 0).
    """
    if seconds < 0:
        seconds = 0.0
    ms_total = _to_units(seconds, 1000)
    m, rem = divmod(ms_total, 60000)
    s, ms = divmod(rem, 1000)
    return f"{m:02d}:{s:02d}.{ms:03d}"  # mm:ss.mmm


def format_timestamp(
    seconds: Optional[float], placeholder: str = DEFAULT_PLACEHOLDER
) -> str:
    """Format seconds as hh:mm:ss.cc (centiseconds).

    ``None`` (no mark set) renders as ``placeholder``. Negative values clamp to 0.

    >>> format_timestamp(6108.35)
    '01:41:48.35'
    """
    if seconds is None:
        return placeholder
    if seconds < 0:
        seconds = 0.0
    cs_total = _to_units(seconds, 100)
    h, rem = divmod(cs_total, 360000)
    m, rem = divmod(rem, 6000)
    s, cs = divmod(rem, 100)
    return f"{h:02d}:{m:02d}:{s:02d}.{cs:02d}"
