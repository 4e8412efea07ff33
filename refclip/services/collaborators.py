"""Interfaces of the platform services the project core depends on.

Dialogs and file I/O are awaited: a Qt dialog blocks inside the coroutine,
while the disk provider pushes work to a thread. Test doubles implement the
same methods in memory.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class FileResult:
    ok: bool
    content: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, content: Optional[str] = None) -> "FileResult":
        return cls(ok=True, content=content)

    @classmethod
    def failure(cls, error: str) -> "FileResult":
        return cls(ok=False, error=error)


@runtime_checkable
class FileDialogProvider(Protocol):
    """Native pickers; each returns a path or None when the user cancels."""

    async def pick_file_to_open(self) -> Optional[str]: ...

    async def pick_video_to_open(self) -> Optional[str]: ...

    async def pick_directory(self) -> Optional[str]: ...

    async def pick_file_to_save(self) -> Optional[str]: ...


@runtime_checkable
class FileIOProvider(Protocol):
    async def read_text_file(self, path: str) -> FileResult: ...

    async def write_text_file(self, path: str, text: str) -> FileResult: ...

    async def file_exists(self, path: str) -> bool: ...


@runtime_checkable
class PlaybackClock(Protocol):
    def current_playback_seconds(self) -> float: ...


__all__ = ["FileResult", "FileDialogProvider", "FileIOProvider", "PlaybackClock"]
