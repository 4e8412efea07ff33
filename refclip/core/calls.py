"""Officiating calls and the fixed basketball call catalog.

Calls are immutable reference data. A clip stores a copy of the call it
annotates, never a reference into the catalog.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from .checks import is_number, non_empty_str


class CallCategory(str, Enum):
    FOUL = "Foul"
    VIOLATION = "Violation"
    MISCELLANEOUS = "Miscellaneous"


@dataclass(frozen=True)
class Call:
    id: int
    call_name: str
    call_category_id: CallCategory

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": int(self.id),
            "callName": self.call_name,
            "callCategoryId": self.call_category_id.value,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Call":
        return Call(
            id=int(d["id"]),
            call_name=str(d["callName"]),
            call_category_id=CallCategory(d["callCategoryId"]),
        )


def is_valid_call(obj: Any) -> bool:
    """Accepts a ``Call`` or its wire dict."""
    if isinstance(obj, Call):
        obj = obj.to_dict()
    if not isinstance(obj, dict):
        return False
    if not is_number(obj.get("id")):
        return False
    if not non_empty_str(obj.get("callName")):
        return False
    category = obj.get("callCategoryId")
    return isinstance(category, str) and category in {c.value for c in CallCategory}


_F = CallCategory.FOUL
_V = CallCategory.VIOLATION
_M = CallCategory.MISCELLANEOUS

# Ids match the legacy Access database the catalog was exported from.
CALLS: List[Call] = [
    Call(1, "Block", _F),
    Call(2, "Charge/Player Control", _F),
    Call(3, "Double Foul", _F),
    Call(4, "Hand Check", _F),
    Call(5, "Hit", _F),
    Call(6, "Hold", _F),
    Call(7, "Illegal Screen", _F),
    Call(8, "Intentional Foul", _F),
    Call(9, "Push", _F),
    Call(10, "Technical Foul", _F),
    Call(11, "Held Ball", _M),
    Call(12, "Note", _M),
    Call(13, "Backcourt", _V),
    Call(14, "Basket Interference", _V),
    Call(15, "Double Dribble", _V),
    Call(16, "Elbows", _V),
    Call(17, "Five Seconds", _V),
    Call(18, "Free Throw Violation", _V),
    Call(19, "Goaltending", _V),
    Call(20, "Jump Ball Violation", _V),
    Call(21, "Kicking", _V),
    Call(22, "Out of Bounds", _V),
    Call(23, "Palming", _V),
    Call(24, "Ten Seconds", _V),
    Call(25, "Three Seconds", _V),
    Call(26, "Throw-in Violation", _V),
    Call(27, "Travel", _V),
    Call(28, "Shot Clock Violation", _V),
]


def get_call_by_id(call_id: int) -> Optional[Call]:
    for call in CALLS:
        if call.id == call_id:
            return call
    return None


def get_calls_by_category(category: CallCategory) -> List[Call]:
    return [c for c in CALLS if c.call_category_id == category]


__all__ = [
    "Call",
    "CallCategory",
    "CALLS",
    "is_valid_call",
    "get_call_by_id",
    "get_calls_by_category",
]
