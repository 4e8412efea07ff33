"""Save/load protocol for project files.

Both operations are coroutines that await the dialog and file I/O providers.
Every check runs before the store is touched, so a failed save or load leaves
in-memory state exactly as it was. Failures are raised as ``ProjectError``
subclasses carrying a user-facing message; a canceled dialog returns False.

Only one save or load may run at a time per ``ProjectPersistence``; a second
call while one is awaiting raises ``PersistenceBusyError``.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from .. import __version__
from ..core.clip import is_valid_clip
from ..core.errors import (
    NotFoundError,
    PersistenceBusyError,
    ProjectError,
    ProjectIOError,
    ValidationError,
)
from ..core.event import is_valid_event, validate_event_for_save
from ..core.project import ProjectData, parse_project, serialize_project
from ..core.store import ProjectStore
from .collaborators import FileDialogProvider, FileIOProvider

logger = logging.getLogger(__name__)


class ProjectPersistence:
    def __init__(
        self,
        store: ProjectStore,
        dialogs: FileDialogProvider,
        files: FileIOProvider,
        app_version: str = __version__,
    ):
        self.store = store
        self.dialogs = dialogs
        self.files = files
        self.app_version = app_version
        self._in_flight: Optional[str] = None

    @property
    def busy(self) -> bool:
        return self._in_flight is not None

    @contextmanager
    def _exclusive(self, operation: str) -> Iterator[None]:
        if self._in_flight is not None:
            raise PersistenceBusyError(
                f"Cannot {operation} the project while a {self._in_flight} is in progress"
            )
        self._in_flight = operation
        try:
            yield
        finally:
            self._in_flight = None

    # --- save ---
    def save_problems(self) -> list:
        """Messages explaining why the project cannot be saved yet (empty if it can)."""
        problems = []
        if not self.store.has_video:
            problems.append("Open a video before saving the project")
        problems.extend(validate_event_for_save(self.store.event))
        return problems

    async def save(self, save_as: bool = False) -> bool:
        """Write the project; returns False when the user cancels the save dialog.

        The previously used path is reused unless ``save_as`` is set or no
        path has been established yet.
        """
        with self._exclusive("save"):
            problems = self.save_problems()
            if problems:
                logger.warning("save rejected: %s", "; ".join(problems))
                raise ValidationError(problems)

            path = None if save_as else self.store.project_path
            if not path:
                path = await self.dialogs.pick_file_to_save()
                if not path:
                    logger.debug("save canceled")
                    return False

            document = self.store.to_project_data(self.app_version)
            try:
                text = serialize_project(document)
            except ValueError as e:  # non-finite clip times
                raise ValidationError(f"Project contains a value that cannot be saved: {e}") from e
            result = await self.files.write_text_file(path, text)
            if not result.ok:
                logger.warning("save to %s failed: %s", path, result.error)
                raise ProjectIOError(result.error or f"Could not write {path}")

            self.store.project_path = path
            self.store.created = document.created
            self.store.mark_clean()
            logger.info("project saved to %s (%d clips)", path, len(document.clips))
            return True

    # --- load ---
    async def load(self) -> bool:
        """Ask for a project file and load it; returns False on cancel.

        On success the caller should point the playback engine at
        ``store.video_source.path``.
        """
        with self._exclusive("load"):
            path = await self.dialogs.pick_file_to_open()
            if not path:
                logger.debug("load canceled")
                return False
            await self._load_from(path)
            return True

    async def load_path(self, path: str) -> bool:
        """Load a known project path (command line, recent files)."""
        with self._exclusive("load"):
            await self._load_from(path)
            return True

    async def _load_from(self, path: str) -> None:
        try:
            project = await self._read_project(path)
        except ProjectError as e:
            logger.warning("load of %s rejected: %s", path, e)
            raise
        self._warn_about_invalid_entries(project)
        self.store.replace_state(project, path)

    async def _read_project(self, path: str) -> ProjectData:
        result = await self.files.read_text_file(path)
        if not result.ok:
            raise ProjectIOError(result.error or f"Could not read {path}")
        project = parse_project(result.content or "")
        video_path = project.video_source.path
        if not video_path or not await self.files.file_exists(video_path):
            raise NotFoundError(video_path)
        return project

    def _warn_about_invalid_entries(self, project: ProjectData) -> None:
        # Shape-valid files may still break per-field rules; they load anyway.
        for clip in project.clips:
            if not is_valid_clip(clip):
                logger.warning("clip %r (%s) fails validation", clip.name, clip.id)
        if project.event is not None and not is_valid_event(project.event):
            logger.warning("event metadata fails validation")


__all__ = ["ProjectPersistence"]
