"""Project document: the persisted unit of a clipping session.

A project file is UTF-8, 2-space indented JSON::

    {
      "version": "2.0.0",
      "appVersion": "0.1.0",
      "created": "2025-11-11T10:30:00Z",
      "modified": "2025-11-11T14:45:00Z",
      "videoSource": {"path": "/videos/game.mp4", "duration": 3120.5},
      "event": {...},            # optional
      "clips": [{...}, ...]
    }

``version`` must equal PROJECT_FILE_VERSION exactly; older or newer files are
rejected, not migrated. ``check_project_structure`` is the minimal shape gate
applied to untrusted input before anything is converted.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..utils.isotime import parse_iso, to_iso, utcnow
from .checks import is_number
from .clip import Clip
from .errors import CorruptedFileError, StructureError, VersionMismatchError
from .event import Event

PROJECT_FILE_VERSION = "2.0.0"


@dataclass
class VideoSource:
    path: str  # absolute path of the source video
    duration: Optional[float] = None  # seconds, when known

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"path": self.path}
        if self.duration is not None:
            d["duration"] = float(self.duration)
        return d

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "VideoSource":
        duration = d.get("duration")
        return VideoSource(
            path=str(d["path"]),
            duration=float(duration) if is_number(duration) else None,
        )


@dataclass
class ProjectData:
    video_source: VideoSource
    app_version: str
    version: str = PROJECT_FILE_VERSION
    created: datetime = field(default_factory=utcnow)
    modified: datetime = field(default_factory=utcnow)
    event: Optional[Event] = None
    clips: List[Clip] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "version": self.version,
            "appVersion": self.app_version,
            "created": to_iso(self.created),
            "modified": to_iso(self.modified),
            "videoSource": self.video_source.to_dict(),
        }
        if self.event is not None:
            d["event"] = self.event.to_dict()
        d["clips"] = [c.to_dict() for c in self.clips]
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectData":
        """Convert a structurally valid document (see ``check_project_structure``)."""
        loaded_at = utcnow()
        created = parse_iso(data.get("created")) or loaded_at
        event_raw = data.get("event")
        return cls(
            version=str(data["version"]),
            app_version=str(data["appVersion"]),
            created=created,
            modified=parse_iso(data.get("modified")) or created,
            video_source=VideoSource.from_dict(data["videoSource"]),
            event=Event.from_dict(event_raw, loaded_at) if isinstance(event_raw, dict) else None,
            clips=[Clip.from_dict(c, loaded_at) for c in data["clips"]],
        )


def check_project_structure(data: Any) -> Optional[str]:
    """Return None when ``data`` has the project shape, else the first problem found."""
    if not isinstance(data, dict):
        return "project file must contain a JSON object"
    for key in ("version", "appVersion", "created", "modified"):
        if not isinstance(data.get(key), str):
            return f"'{key}' must be a string"
    source = data.get("videoSource")
    if not isinstance(source, dict) or not isinstance(source.get("path"), str):
        return "'videoSource.path' must be a string"
    event = data.get("event")
    if event is not None and not isinstance(event, dict):
        return "'event' must be an object"
    clips = data.get("clips")
    if not isinstance(clips, list):
        return "'clips' must be an array"
    for i, clip in enumerate(clips):
        if not isinstance(clip, dict):
            return f"clip #{i + 1} must be an object"
        for key in ("id", "name"):
            if not isinstance(clip.get(key), str):
                return f"clip #{i + 1}: '{key}' must be a string"
        for key in ("inSeconds", "outSeconds"):
            if not is_number(clip.get(key)):
                return f"clip #{i + 1}: '{key}' must be a number"
    return None


def is_valid_project_data(data: Any) -> bool:
    return check_project_structure(data) is None


def is_supported_version(version: str) -> bool:
    return version == PROJECT_FILE_VERSION


def serialize_project(project: ProjectData) -> str:
    return json.dumps(project.to_dict(), indent=2, ensure_ascii=False, allow_nan=False) + "\n"


def parse_project(text: str) -> ProjectData:
    """Decode and gate a project file's contents.

    Raises CorruptedFileError (not JSON), StructureError (wrong shape) or
    VersionMismatchError, in that order of checking.
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError, RecursionError) as e:
        raise CorruptedFileError(f"Project file is corrupted and could not be read: {e}") from e
    problem = check_project_structure(data)
    if problem is not None:
        raise StructureError(f"Project file has an invalid structure: {problem}")
    if not is_supported_version(data["version"]):
        raise VersionMismatchError(data["version"], PROJECT_FILE_VERSION)
    return ProjectData.from_dict(data)


__all__ = [
    "PROJECT_FILE_VERSION",
    "VideoSource",
    "ProjectData",
    "check_project_structure",
    "is_valid_project_data",
    "is_supported_version",
    "serialize_project",
    "parse_project",
]
