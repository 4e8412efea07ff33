"""Pending in/out marks and clip creation from them.

Marks self-correct when set: raising the in-mark past the out-mark drags the
out-mark along (and vice versa), so ``in <= out`` holds whenever both exist.
A clip is only derived when ``out > in`` strictly.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from ..utils.isotime import utcnow
from .clip import Clip, generate_clip_id
from .repository import ClipRepository

logger = logging.getLogger(__name__)

MarksListener = Callable[[Optional[float], Optional[float]], None]


class MarkState(Enum):
    EMPTY = "empty"
    IN_ONLY = "in_only"
    OUT_ONLY = "out_only"
    BOTH = "both"


class MarkStateMachine:
    def __init__(
        self,
        repository: ClipRepository,
        clock: Callable[[], float] = lambda: 0.0,
        now: Callable[[], datetime] = utcnow,
        id_factory: Callable[[], str] = generate_clip_id,
    ):
        """``clock`` reports the current playback position in seconds."""
        self._repository = repository
        self._clock = clock
        self._now = now
        self._id_factory = id_factory
        self._in: Optional[float] = None
        self._out: Optional[float] = None
        self.listener: Optional[MarksListener] = None

    @property
    def in_mark(self) -> Optional[float]:
        return self._in

    @property
    def out_mark(self) -> Optional[float]:
        return self._out

    @property
    def state(self) -> MarkState:
        if self._in is None and self._out is None:
            return MarkState.EMPTY
        if self._out is None:
            return MarkState.IN_ONLY
        if self._in is None:
            return MarkState.OUT_ONLY
        return MarkState.BOTH

    def _resolve(self, t: Optional[float]) -> float:
        value = self._clock() if t is None else t
        return max(0.0, float(value))

    def _notify(self) -> None:
        if self.listener is not None:
            self.listener(self._in, self._out)

    def mark_in(self, t: Optional[float] = None) -> None:
        t = self._resolve(t)
        self._in = t
        if self._out is not None and t > self._out:
            self._out = t
        self._notify()

    def mark_out(self, t: Optional[float] = None) -> None:
        t = self._resolve(t)
        self._out = t
        if self._in is not None and t < self._in:
            self._in = t
        self._notify()

    def add_clip_from_marks(self) -> Optional[Clip]:
        """Commit the marked interval as ``Clip {n+1}`` and reset to EMPTY.

        No-op (returns None) unless both marks are set and out > in.
        """
        if self.state is not MarkState.BOTH or not self._out > self._in:
            return None
        now = self._now()
        clip = Clip(
            id=self._id_factory(),
            name=f"Clip {len(self._repository) + 1}",
            in_seconds=self._in,
            out_seconds=self._out,
            created_on=now,
            modified_on=now,
        )
        self._repository.add(clip)
        logger.info("clip %r created from marks [%.3f, %.3f]", clip.name, self._in, self._out)
        self._in = None
        self._out = None
        self._notify()
        return clip

    def clear_marks(self) -> None:
        self._in = None
        self._out = None
        self._notify()


__all__ = ["MarkState", "MarkStateMachine"]
