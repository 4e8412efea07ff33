"""Ordered clip collection plus the export selection set.

Iteration order is insertion order. Use ``sort_clips_by_time`` for a
time-ordered view; it never touches the canonical order kept here.

Clip ids are assumed unique (``generate_clip_id`` mixes the clock with a random
suffix); the repository itself does not reject duplicates.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, Iterator, List, Optional, Set

from .clip import Clip, ClipUpdate

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[], None]


class ClipRepository:
    def __init__(self, on_change: Optional[ChangeCallback] = None):
        self._clips: List[Clip] = []
        self._selected: Set[str] = set()
        self._on_change = on_change

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    # --- read access ---
    @property
    def clips(self) -> List[Clip]:
        """Snapshot of the clips in insertion order."""
        return list(self._clips)

    def __iter__(self) -> Iterator[Clip]:
        return iter(list(self._clips))

    def __len__(self) -> int:
        return len(self._clips)

    def get(self, clip_id: str) -> Optional[Clip]:
        for clip in self._clips:
            if clip.id == clip_id:
                return clip
        return None

    # --- mutation ---
    def add(self, clip: Clip) -> Clip:
        self._clips.append(clip)
        logger.debug("clip added id=%s [%s, %s]", clip.id, clip.in_seconds, clip.out_seconds)
        self._changed()
        return clip

    def update(
        self,
        clip_id: str,
        update: Optional[ClipUpdate] = None,
        now: Optional[datetime] = None,
        **changes,
    ) -> Optional[Clip]:
        """Merge ``update`` (or keyword changes) into the clip with ``clip_id``.

        ``modified_on`` is always refreshed. Returns the updated clip, or None
        when no clip has that id.
        """
        if update is None:
            update = ClipUpdate(**changes)
        elif changes:
            raise TypeError("pass either a ClipUpdate or keyword changes, not both")
        clip = self.get(clip_id)
        if clip is None:
            logger.debug("update ignored, unknown clip id=%s", clip_id)
            return None
        update.apply_to(clip, now)
        self._changed()
        return clip

    def delete(self, clip_id: str) -> bool:
        """Remove the clip and drop it from the selection in one step."""
        before = len(self._clips)
        self._clips = [c for c in self._clips if c.id != clip_id]
        self._selected.discard(clip_id)
        removed = len(self._clips) != before
        if removed:
            self._changed()
        return removed

    def replace_all(self, clips: Iterable[Clip]) -> None:
        self._clips = list(clips)
        self._selected.clear()
        self._changed()

    # --- selection ---
    def toggle_select(self, clip_id: str) -> bool:
        """Flip selection for ``clip_id``; returns the new selected state."""
        if clip_id in self._selected:
            self._selected.discard(clip_id)
            return False
        self._selected.add(clip_id)
        return True

    def is_selected(self, clip_id: str) -> bool:
        return clip_id in self._selected

    def selected(self) -> List[Clip]:
        """Selected clips in repository order."""
        return [c for c in self._clips if c.id in self._selected]

    @property
    def selected_ids(self) -> frozenset:
        return frozenset(self._selected)

    def clear_selection(self) -> None:
        self._selected.clear()


__all__ = ["ClipRepository"]
