"""Runtime configuration read from environment variables.

Environment variables:
    REFCLIP_LOG_LEVEL: logging level name (default INFO)
    REFCLIP_SCREEN_INDEX: screen to center the main window on (default primary)
    REFCLIP_FFMPEG: ffmpeg executable used for export commands (default "ffmpeg")
    REFCLIP_EXPORT_DIR: default directory for exported clips (default: ask)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)


@dataclass
class AppConfig:
    log_level: int = logging.INFO
    screen_index: Optional[int] = None
    ffmpeg_binary: str = "ffmpeg"
    export_dir: Optional[str] = None


def _parse_level(value: Optional[str]) -> int:
    if not value:
        return logging.INFO
    level = logging.getLevelName(value.strip().upper())
    if isinstance(level, int):
        return level
    logger.warning("unknown REFCLIP_LOG_LEVEL %r, using INFO", value)
    return logging.INFO


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning("ignoring non-integer REFCLIP_SCREEN_INDEX %r", value)
        return None


def load_config(environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    env = os.environ if environ is None else environ
    return AppConfig(
        log_level=_parse_level(env.get("REFCLIP_LOG_LEVEL")),
        screen_index=_parse_int(env.get("REFCLIP_SCREEN_INDEX")),
        ffmpeg_binary=env.get("REFCLIP_FFMPEG") or "ffmpeg",
        export_dir=env.get("REFCLIP_EXPORT_DIR") or None,
    )


__all__ = ["AppConfig", "load_config"]
