"""Clip model: a named time interval over the project's video plus officiating notes.

The in-memory form uses snake_case attributes and aware datetimes; ``to_dict`` /
``from_dict`` translate to the camelCase wire form stored in project files.
"""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..utils.isotime import parse_iso, to_iso, utcnow
from .calls import Call, is_valid_call
from .checks import (
    is_number,
    non_empty_str,
    optional_bool,
    optional_non_empty_str,
    optional_str,
)

# attribute name -> wire key, for the optional annotation fields
ANNOTATION_KEYS: Dict[str, str] = {
    "clip_index_number": "clipIndexNumber",
    "period": "period",
    "clock_time": "clockTime",
    "call": "call",
    "official_position": "officialPosition",
    "official_name": "officialName",
    "call_type": "callType",
    "was_shooting": "wasShooting",
    "was_multiple_whistles": "wasMultipleWhistles",
    "was_correct_decision": "wasCorrectDecision",
    "was_correct_official_position": "wasCorrectOfficialPosition",
    "should_review": "shouldReview",
    "description": "description",
    "tags": "tags",
    "comments": "comments",
}

_NON_EMPTY_TEXT_KEYS = (
    "period",
    "clockTime",
    "officialPosition",
    "officialName",
    "callType",
    "wasCorrectDecision",
    "wasCorrectOfficialPosition",
)
_FREE_TEXT_KEYS = ("description", "tags", "comments")
_FLAG_KEYS = ("wasShooting", "wasMultipleWhistles", "shouldReview")


@dataclass
class Clip:
    id: str
    name: str
    in_seconds: float
    out_seconds: float
    clip_index_number: Optional[int] = None
    period: Optional[str] = None
    clock_time: Optional[str] = None
    call: Optional[Call] = None
    official_position: Optional[str] = None
    official_name: Optional[str] = None
    call_type: Optional[str] = None  # "Call" | "Non-Call" | "Missed Call"
    was_shooting: Optional[bool] = None
    was_multiple_whistles: Optional[bool] = None
    was_correct_decision: Optional[str] = None
    was_correct_official_position: Optional[str] = None
    should_review: Optional[bool] = None
    description: Optional[str] = None
    tags: Optional[str] = None
    comments: Optional[str] = None
    created_on: datetime = field(default_factory=utcnow)
    modified_on: datetime = field(default_factory=utcnow)

    @property
    def duration(self) -> float:
        return self.out_seconds - self.in_seconds

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "inSeconds": float(self.in_seconds),
            "outSeconds": float(self.out_seconds),
        }
        for attr, key in ANNOTATION_KEYS.items():
            value = getattr(self, attr)
            if value is None:
                continue
            d[key] = value.to_dict() if isinstance(value, Call) else value
        d["createdOn"] = to_iso(self.created_on)
        d["modifiedOn"] = to_iso(self.modified_on)
        return d

    @staticmethod
    def from_dict(d: Dict[str, Any], default_time: Optional[datetime] = None) -> "Clip":
        """Build a clip from its wire dict.

        Missing or unparseable timestamps fall back to ``default_time`` (now).
        Optional fields that are absent stay ``None``.
        """
        fallback = default_time or utcnow()
        created = parse_iso(d.get("createdOn")) or fallback
        modified = parse_iso(d.get("modifiedOn")) or created
        kwargs: Dict[str, Any] = {}
        for attr, key in ANNOTATION_KEYS.items():
            value = d.get(key)
            if value is None:
                continue
            if attr == "call":
                value = Call.from_dict(value) if is_valid_call(value) else None
            elif attr == "clip_index_number":
                value = int(value) if is_number(value) else None
            kwargs[attr] = value
        return Clip(
            id=str(d["id"]),
            name=str(d["name"]),
            in_seconds=float(d["inSeconds"]),
            out_seconds=float(d["outSeconds"]),
            created_on=created,
            modified_on=modified,
            **kwargs,
        )


@dataclass
class ClipUpdate:
    """Partial clip update.

    ``None`` leaves the field as is; any other value replaces it. Optional
    annotation fields named in ``clear`` are reset to ``None``. ``id`` and
    ``created_on`` are not updatable.
    """

    name: Optional[str] = None
    in_seconds: Optional[float] = None
    out_seconds: Optional[float] = None
    clip_index_number: Optional[int] = None
    period: Optional[str] = None
    clock_time: Optional[str] = None
    call: Optional[Call] = None
    official_position: Optional[str] = None
    official_name: Optional[str] = None
    call_type: Optional[str] = None
    was_shooting: Optional[bool] = None
    was_multiple_whistles: Optional[bool] = None
    was_correct_decision: Optional[str] = None
    was_correct_official_position: Optional[str] = None
    should_review: Optional[bool] = None
    description: Optional[str] = None
    tags: Optional[str] = None
    comments: Optional[str] = None
    clear: Tuple[str, ...] = ()

    def __post_init__(self):
        unknown = [name for name in self.clear if name not in ANNOTATION_KEYS]
        if unknown:
            raise ValueError(f"cannot clear non-optional clip fields: {unknown}")

    def apply_to(self, clip: Clip, now: Optional[datetime] = None) -> Clip:
        """Merge into ``clip`` in place and stamp ``modified_on``."""
        for f in fields(self):
            if f.name == "clear":
                continue
            value = getattr(self, f.name)
            if value is not None:
                setattr(clip, f.name, value)
        for name in self.clear:
            setattr(clip, name, None)
        clip.modified_on = max(now or utcnow(), clip.created_on)
        return clip


def _timestamp_ok(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    return parse_iso(value)


def is_valid_clip(obj: Any) -> bool:
    """Full per-field clip validation over a ``Clip`` or its wire dict."""
    if isinstance(obj, Clip):
        obj = obj.to_dict()
    if not isinstance(obj, dict):
        return False

    if not non_empty_str(obj.get("id")) or not non_empty_str(obj.get("name")):
        return False

    in_s, out_s = obj.get("inSeconds"), obj.get("outSeconds")
    if not is_number(in_s) or not is_number(out_s):
        return False
    if in_s < 0 or out_s < 0 or in_s >= out_s:
        return False

    idx = obj.get("clipIndexNumber")
    if idx is not None and not is_number(idx):
        return False
    if not all(optional_non_empty_str(obj, key) for key in _NON_EMPTY_TEXT_KEYS):
        return False
    if not all(optional_str(obj, key) for key in _FREE_TEXT_KEYS):
        return False
    if not all(optional_bool(obj, key) for key in _FLAG_KEYS):
        return False
    if obj.get("call") is not None and not is_valid_call(obj["call"]):
        return False

    created = _timestamp_ok(obj.get("createdOn"))
    modified = _timestamp_ok(obj.get("modifiedOn"))
    if created is None or modified is None:
        return False
    try:
        return modified >= created
    except TypeError:  # naive vs aware datetimes
        return False


def clip_duration(clip: Clip) -> float:
    return clip.out_seconds - clip.in_seconds


def format_clip_time_range(clip: Clip, precision: int = 1) -> str:
    return f"{clip.in_seconds:.{precision}f}s - {clip.out_seconds:.{precision}f}s"


def clips_overlap(a: Clip, b: Clip) -> bool:
    """Open-interval intersection; touching clips (a.out == b.in) do not overlap."""
    return a.in_seconds < b.out_seconds and b.in_seconds < a.out_seconds


def sort_clips_by_time(clips: Iterable[Clip]) -> List[Clip]:
    """Stable ascending sort by in-point; returns a new list."""
    return sorted(clips, key=lambda c: c.in_seconds)


def create_default_clip() -> Clip:
    """Blank form values for a clip being authored; not valid until filled in."""
    now = utcnow()
    return Clip(id="", name="", in_seconds=0.0, out_seconds=0.0, created_on=now, modified_on=now)


_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(n: int) -> str:
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 36)
        out.append(_BASE36[r])
    return "".join(reversed(out))


def generate_clip_id() -> str:
    """Millisecond clock in base 36 followed by 8 random base-36 characters."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(8))
    return _base36(int(time.time() * 1000)) + suffix


__all__ = [
    "Clip",
    "ClipUpdate",
    "ANNOTATION_KEYS",
    "is_valid_clip",
    "clip_duration",
    "format_clip_time_range",
    "clips_overlap",
    "sort_clips_by_time",
    "create_default_clip",
    "generate_clip_id",
]
