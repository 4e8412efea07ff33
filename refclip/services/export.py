"""Clip export scaffold.

``request_export`` builds the ffmpeg stream-copy command for one clip and logs
it; nothing is transcoded yet, and it always reports success. Running the
command (with progress from ffmpeg's stderr) is the future implementation.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from ..core.clip import Clip

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]  # 0.0 - 1.0


@dataclass
class ExportSettings:
    output_dir: Optional[str] = None  # None: ffmpeg's working directory
    ffmpeg_binary: str = "ffmpeg"


def export_file_name(clip: Clip) -> str:
    safe_name = re.sub(r"\s+", "_", clip.name)
    return f"{safe_name}_{clip.in_seconds:.2f}-{clip.out_seconds:.2f}.mp4"


def build_export_command(
    source_path: str, clip: Clip, settings: Optional[ExportSettings] = None
) -> List[str]:
    settings = settings or ExportSettings()
    output = export_file_name(clip)
    if settings.output_dir:
        output = os.path.join(settings.output_dir, output)
    return [
        settings.ffmpeg_binary,
        "-i",
        source_path,
        "-ss",
        repr(float(clip.in_seconds)),
        "-to",
        repr(float(clip.out_seconds)),
        "-c",
        "copy",
        output,
    ]


def request_export(
    source_path: str, clip: Clip, settings: Optional[ExportSettings] = None
) -> bool:
    """Stub: queue an export of ``clip`` from ``source_path``.

    Returns True unconditionally; it does not mean a file was written.
    """
    cmd = build_export_command(source_path, clip, settings)
    logger.info("stub export with ffmpeg: %s", " ".join(cmd))
    return True


def export_clips(
    source_path: str,
    clips: Iterable[Clip],
    settings: Optional[ExportSettings] = None,
    progress: Optional[ProgressCallback] = None,
) -> int:
    """Request an export per clip; returns how many requests were accepted."""
    clips = list(clips)
    accepted = 0
    for i, clip in enumerate(clips, start=1):
        if request_export(source_path, clip, settings):
            accepted += 1
        if progress:
            progress(i / len(clips))
    return accepted


__all__ = [
    "ExportSettings",
    "ProgressCallback",
    "export_file_name",
    "build_export_command",
    "request_export",
    "export_clips",
]
