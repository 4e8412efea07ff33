"""Qt implementation of the FileDialogProvider.

QFileDialog's static helpers are modal and run their own event loop, so the
coroutines simply return their result.
"""

from __future__ import annotations

import os
from typing import Optional

from PySide6.QtWidgets import QFileDialog, QWidget

PROJECT_FILTER = "Clip Projects (*.json)"
VIDEO_FILTER = "Video Files (*.mp4 *.mkv *.mov *.avi)"


class QtFileDialogs:
    def __init__(self, parent: Optional[QWidget] = None):
        self.parent = parent
        self.last_dir = ""

    def _remember(self, path: str) -> Optional[str]:
        if not path:
            return None
        self.last_dir = os.path.dirname(path)
        return path

    async def pick_file_to_open(self) -> Optional[str]:
        path, _ = QFileDialog.getOpenFileName(
            self.parent, "Open Project", self.last_dir, PROJECT_FILTER
        )
        return self._remember(path)

    async def pick_video_to_open(self) -> Optional[str]:
        path, _ = QFileDialog.getOpenFileName(
            self.parent, "Open Video", self.last_dir, VIDEO_FILTER
        )
        return self._remember(path)

    async def pick_directory(self) -> Optional[str]:
        path = QFileDialog.getExistingDirectory(
            self.parent, "Choose Output Directory", self.last_dir
        )
        return path or None

    async def pick_file_to_save(self) -> Optional[str]:
        path, _ = QFileDialog.getSaveFileName(
            self.parent, "Save Project", self.last_dir, PROJECT_FILTER
        )
        if path and not os.path.splitext(path)[1]:
            path += ".json"
        return self._remember(path)


__all__ = ["QtFileDialogs", "PROJECT_FILTER", "VIDEO_FILTER"]
