"""Top-level application package exports.

Public API surface (keep minimal):
 - ProjectStore (single project state container)
 - ProjectPersistence (async save/load)
 - format_time, format_timestamp (time display)

UI classes live in ``refclip.ui`` and are not imported here so the core can be
used without a display.
"""

__version__ = "0.1.0"

from .core.store import ProjectStore  # noqa: E402,F401
from .services.persistence import ProjectPersistence  # noqa: E402,F401
from .utils.timefmt import format_time, format_timestamp  # noqa: E402,F401

__all__ = ["__version__", "ProjectStore", "ProjectPersistence", "format_time", "format_timestamp"]
