"""Single owned state container for one open project.

Every consumer (window, dialogs, persistence) receives the same ProjectStore
instance and mutates project state only through its operations. Changes to
clips, the event or the video source set the advisory dirty flag; a
successful save or load clears it.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional

from ..utils.isotime import utcnow
from .clip import Clip, ClipUpdate
from .event import Event, EventUpdate
from .event_manager import EventMetadataManager
from .marks import MarkState, MarkStateMachine
from .project import ProjectData, VideoSource
from .repository import ClipRepository

logger = logging.getLogger(__name__)


class ProjectStore:
    def __init__(self, now: Callable[[], datetime] = utcnow):
        self._now = now
        self._dirty = False
        self._listeners: List[Callable[[], None]] = []
        self.current_time: float = 0.0
        self.video_source: Optional[VideoSource] = None
        self.project_path: Optional[str] = None
        self.created: datetime = now()
        self.repository = ClipRepository(on_change=self._mark_dirty)
        self.events = EventMetadataManager(on_change=self._mark_dirty)
        self.marks = MarkStateMachine(
            self.repository, clock=lambda: self.current_time, now=now
        )
        self.marks.listener = lambda _in, _out: self._notify()

    # --- change tracking ---
    @property
    def dirty(self) -> bool:
        return self._dirty

    def _mark_dirty(self) -> None:
        self._dirty = True
        self._notify()

    def mark_clean(self) -> None:
        self._dirty = False
        self._notify()

    def subscribe(self, callback: Callable[[], None]) -> None:
        """Register a callback run after every state change (UI refresh)."""
        self._listeners.append(callback)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback()

    # --- playback position / source ---
    def set_current_time(self, seconds: float) -> None:
        self.current_time = max(0.0, float(seconds))

    def set_video_source(self, path: str, duration: Optional[float] = None) -> None:
        self.video_source = VideoSource(path=path, duration=duration)
        logger.info("video source set: %s", path)
        self._mark_dirty()

    @property
    def has_video(self) -> bool:
        return self.video_source is not None and bool(self.video_source.path)

    # --- marks ---
    @property
    def in_mark(self) -> Optional[float]:
        return self.marks.in_mark

    @property
    def out_mark(self) -> Optional[float]:
        return self.marks.out_mark

    @property
    def mark_state(self) -> MarkState:
        return self.marks.state

    def mark_in(self, t: Optional[float] = None) -> None:
        self.marks.mark_in(t)

    def mark_out(self, t: Optional[float] = None) -> None:
        self.marks.mark_out(t)

    def add_clip_from_marks(self) -> Optional[Clip]:
        return self.marks.add_clip_from_marks()

    def clear_marks(self) -> None:
        self.marks.clear_marks()

    # --- clips / selection ---
    @property
    def clips(self) -> List[Clip]:
        return self.repository.clips

    def add_clip(self, clip: Clip) -> Clip:
        return self.repository.add(clip)

    def update_clip(self, clip_id: str, update: Optional[ClipUpdate] = None, **changes) -> Optional[Clip]:
        return self.repository.update(clip_id, update, now=self._now(), **changes)

    def delete_clip(self, clip_id: str) -> bool:
        return self.repository.delete(clip_id)

    def toggle_selection(self, clip_id: str) -> bool:
        selected = self.repository.toggle_select(clip_id)
        self._notify()
        return selected

    def is_selected(self, clip_id: str) -> bool:
        return self.repository.is_selected(clip_id)

    def selected_clips(self) -> List[Clip]:
        return self.repository.selected()

    # --- event ---
    @property
    def event(self) -> Optional[Event]:
        return self.events.event

    def update_event(self, update: Optional[EventUpdate] = None, **changes) -> Event:
        return self.events.update_event(update, now=self._now(), **changes)

    # --- whole-project operations ---
    def to_project_data(self, app_version: str) -> ProjectData:
        """Build the document to persist from the current state."""
        if self.video_source is None:
            raise ValueError("no video source to save")
        now = self._now()
        return ProjectData(
            app_version=app_version,
            created=min(self.created, now),
            modified=now,
            video_source=VideoSource(self.video_source.path, self.video_source.duration),
            event=self.event,
            clips=self.repository.clips,
        )

    def replace_state(self, project: ProjectData, path: str) -> None:
        """Commit a loaded project: all prior clips, selection, marks and event go."""
        self.repository.replace_all(project.clips)
        self.events.replace(project.event)
        self.video_source = VideoSource(project.video_source.path, project.video_source.duration)
        self.project_path = path
        self.created = project.created
        self.current_time = 0.0
        self.marks.clear_marks()
        self.mark_clean()
        logger.info("project loaded from %s (%d clips)", path, len(project.clips))

    def new_project(self) -> None:
        self.repository.replace_all([])
        self.events.clear()
        self.video_source = None
        self.project_path = None
        self.created = self._now()
        self.current_time = 0.0
        self.marks.clear_marks()
        self.mark_clean()


__all__ = ["ProjectStore"]
