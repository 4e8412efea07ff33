"""Project error taxonomy.

Every error here is recoverable: the operation that raised it leaves the
in-memory project untouched and the UI shows ``str(error)`` to the user.
Canceling a file dialog is not an error; operations return ``False`` instead.
"""

from __future__ import annotations

from typing import Iterable, List


class ProjectError(Exception):
    """Base class for all user-facing project failures."""


class ValidationError(ProjectError):
    """Project state or input data fails a validation rule."""

    def __init__(self, messages: Iterable[str] | str):
        if isinstance(messages, str):
            messages = [messages]
        self.messages: List[str] = list(messages)
        super().__init__("\n".join(self.messages))


class StructureError(ValidationError):
    """Decoded project document does not have the expected shape."""


class CorruptedFileError(ValidationError):
    """Project file is not parseable JSON."""


class VersionMismatchError(ProjectError):
    def __init__(self, found: str, supported: str):
        self.found = found
        self.supported = supported
        super().__init__(
            f"Unsupported project file version {found!r} "
            f"(this application reads version {supported!r})"
        )


class NotFoundError(ProjectError):
    """A file referenced by the project is missing."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Video file not found: {path}")


class ProjectIOError(ProjectError):
    """Read/write failure reported by the file I/O provider (message kept verbatim)."""


class PersistenceBusyError(ProjectError):
    """A save or load is already running."""


__all__ = [
    "ProjectError",
    "ValidationError",
    "StructureError",
    "CorruptedFileError",
    "VersionMismatchError",
    "NotFoundError",
    "ProjectIOError",
    "PersistenceBusyError",
]
