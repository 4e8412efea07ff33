"""Event model: metadata for the recorded contest as a whole.

A project holds at most one Event. Field checks live in two places:
``is_valid_event`` is the full structural/per-field validator, while
``validate_event_details`` and ``validate_event_for_save`` return the
user-facing messages shown by the event form and the save command.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..utils.isotime import parse_iso, to_iso, utcnow
from .checks import is_valid_url, non_empty_str, optional_non_empty_str, optional_str


class Gender(str, Enum):
    BOYS = "boys"
    GIRLS = "girls"
    COED = "coed"


class AgeLevel(str, Enum):
    JV = "JV"
    VARSITY = "Varsity"
    NCAA_DIV_3 = "NCAA Div 3"


class Sport(str, Enum):
    BASKETBALL = "basketball"
    FOOTBALL = "football"
    VOLLEYBALL = "volleyball"


DEFAULT_GENDER = Gender.BOYS
DEFAULT_AGE_LEVEL = AgeLevel.VARSITY
DEFAULT_SPORT = Sport.BASKETBALL

# attribute name -> wire key for the optional text fields
OPTIONAL_TEXT_KEYS: Dict[str, str] = {
    "event_name": "eventName",
    "location": "location",
    "home_team": "homeTeam",
    "away_team": "awayTeam",
    "video_link": "videoLink",
    "notes": "notes",
}


@dataclass
class Official:
    name: str
    position: Optional[str] = None  # "Referee", "Umpire 1", "R2", ...

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"name": self.name}
        if self.position is not None:
            d["position"] = self.position
        return d

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Official":
        position = d.get("position")
        return Official(
            name=str(d.get("name", "")),
            position=str(position) if position is not None else None,
        )


def _enum_or(enum_cls, value: Any, default):
    try:
        return enum_cls(value)
    except ValueError:
        return default


@dataclass
class Event:
    date: datetime
    gender: Gender = DEFAULT_GENDER
    age_level: AgeLevel = DEFAULT_AGE_LEVEL
    sport: Sport = DEFAULT_SPORT
    event_name: Optional[str] = None
    location: Optional[str] = None
    home_team: Optional[str] = None
    away_team: Optional[str] = None
    officiating_crew: List[Official] = field(default_factory=list)
    video_link: Optional[str] = None
    notes: Optional[str] = None
    created_on: datetime = field(default_factory=utcnow)
    modified_on: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "date": to_iso(self.date),
            "gender": self.gender.value,
            "ageLevel": self.age_level.value,
            "sport": self.sport.value,
        }
        for attr, key in OPTIONAL_TEXT_KEYS.items():
            value = getattr(self, attr)
            if value is not None:
                d[key] = value
        d["officiatingCrew"] = [o.to_dict() for o in self.officiating_crew]
        d["createdOn"] = to_iso(self.created_on)
        d["modifiedOn"] = to_iso(self.modified_on)
        return d

    @staticmethod
    def from_dict(d: Dict[str, Any], default_time: Optional[datetime] = None) -> "Event":
        """Rebuild an event from its wire dict.

        Unknown enum values fall back to the defaults and unparseable timestamps
        to ``default_time``; the caller runs ``is_valid_event`` on the raw dict
        to report such problems.
        """
        fallback = default_time or utcnow()
        created = parse_iso(d.get("createdOn")) or fallback
        modified = parse_iso(d.get("modifiedOn")) or created
        crew_raw = d.get("officiatingCrew")
        crew = [
            Official.from_dict(o)
            for o in (crew_raw if isinstance(crew_raw, list) else [])
            if isinstance(o, dict)
        ]
        kwargs: Dict[str, Any] = {}
        for attr, key in OPTIONAL_TEXT_KEYS.items():
            value = d.get(key)
            if isinstance(value, str):
                kwargs[attr] = value
        return Event(
            date=parse_iso(d.get("date")) or created,
            gender=_enum_or(Gender, d.get("gender"), DEFAULT_GENDER),
            age_level=_enum_or(AgeLevel, d.get("ageLevel"), DEFAULT_AGE_LEVEL),
            sport=_enum_or(Sport, d.get("sport"), DEFAULT_SPORT),
            officiating_crew=crew,
            created_on=created,
            modified_on=modified,
            **kwargs,
        )


@dataclass
class EventUpdate:
    """Partial event update; ``None`` leaves a field untouched.

    Optional text fields named in ``clear`` are reset to ``None``.
    """

    date: Optional[datetime] = None
    gender: Optional[Gender] = None
    age_level: Optional[AgeLevel] = None
    sport: Optional[Sport] = None
    event_name: Optional[str] = None
    location: Optional[str] = None
    home_team: Optional[str] = None
    away_team: Optional[str] = None
    officiating_crew: Optional[List[Official]] = None
    video_link: Optional[str] = None
    notes: Optional[str] = None
    clear: Tuple[str, ...] = ()

    def __post_init__(self):
        unknown = [name for name in self.clear if name not in OPTIONAL_TEXT_KEYS]
        if unknown:
            raise ValueError(f"cannot clear required event fields: {unknown}")

    def values(self) -> Dict[str, Any]:
        """Fields explicitly set by this update."""
        out = {}
        for f in fields(self):
            if f.name == "clear":
                continue
            value = getattr(self, f.name)
            if value is not None:
                out[f.name] = list(value) if f.name == "officiating_crew" else value
        return out


def create_default_event(now: Optional[datetime] = None) -> Event:
    now = now or utcnow()
    return Event(date=now, created_on=now, modified_on=now)


def is_valid_official(obj: Any) -> bool:
    if isinstance(obj, Official):
        obj = obj.to_dict()
    if not isinstance(obj, dict):
        return False
    return non_empty_str(obj.get("name")) and optional_str(obj, "position")


def _as_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    return parse_iso(value)


def is_valid_event(obj: Any) -> bool:
    """Full validation of an ``Event`` or its wire dict."""
    if isinstance(obj, Event):
        obj = obj.to_dict()
    if not isinstance(obj, dict):
        return False

    if _as_datetime(obj.get("date")) is None:
        return False
    if obj.get("gender") not in {g.value for g in Gender}:
        return False
    if obj.get("ageLevel") not in {a.value for a in AgeLevel}:
        return False
    if obj.get("sport") not in {s.value for s in Sport}:
        return False

    for key in ("eventName", "location", "homeTeam", "awayTeam", "videoLink"):
        if not optional_non_empty_str(obj, key):
            return False
    if not optional_str(obj, "notes"):
        return False
    home, away = obj.get("homeTeam"), obj.get("awayTeam")
    if home and away and home == away:
        return False
    if obj.get("videoLink") is not None and not is_valid_url(obj["videoLink"]):
        return False

    crew = obj.get("officiatingCrew")
    if not isinstance(crew, list) or not crew or not all(is_valid_official(o) for o in crew):
        return False

    created = _as_datetime(obj.get("createdOn"))
    modified = _as_datetime(obj.get("modifiedOn"))
    if created is None or modified is None:
        return False
    try:
        return modified >= created
    except TypeError:
        return False


def named_officials(event: Event) -> List[Official]:
    return [o for o in event.officiating_crew if o.name and o.name.strip()]


def validate_event_for_save(event: Optional[Event]) -> List[str]:
    """Requirements a project must meet before it may be written."""
    if event is None:
        return ["Event details are required", "At least one official with a name is required"]
    errors = []
    if event.date is None:
        errors.append("Date is required")
    if not named_officials(event):
        errors.append("At least one official with a name is required")
    return errors


def validate_event_details(event: Event) -> List[str]:
    """Everything the event form checks before committing an edit."""
    errors = validate_event_for_save(event)
    home = (event.home_team or "").strip()
    away = (event.away_team or "").strip()
    if home and away and home == away:
        errors.append("Home team and away team must be different")
    if event.video_link and event.video_link.strip() and not is_valid_url(event.video_link):
        errors.append("Video link must be a valid URL")
    return errors


__all__ = [
    "Gender",
    "AgeLevel",
    "Sport",
    "Official",
    "Event",
    "EventUpdate",
    "create_default_event",
    "is_valid_official",
    "is_valid_event",
    "named_officials",
    "validate_event_for_save",
    "validate_event_details",
]
