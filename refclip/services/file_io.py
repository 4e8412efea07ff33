"""Local-disk FileIOProvider.

Blocking filesystem calls run in a worker thread via ``asyncio.to_thread``.
Writes go to a temp file in the target directory and are moved into place,
so a failed save never leaves a half-written project behind.
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile

from .collaborators import FileResult

logger = logging.getLogger(__name__)


def _atomic_write_text(path: str, text: str, encoding: str = "utf-8") -> None:
    d = os.path.dirname(os.path.abspath(path))
    os.makedirs(d, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(prefix=".tmp_", dir=d)
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


class LocalFileIO:
    async def read_text_file(self, path: str) -> FileResult:
        try:
            content = await asyncio.to_thread(_read_text, path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("read failed for %s: %s", path, e)
            return FileResult.failure(str(e))
        return FileResult.success(content)

    async def write_text_file(self, path: str, text: str) -> FileResult:
        try:
            await asyncio.to_thread(_atomic_write_text, path, text)
        except OSError as e:
            logger.warning("write failed for %s: %s", path, e)
            return FileResult.failure(str(e))
        return FileResult.success()

    async def file_exists(self, path: str) -> bool:
        return await asyncio.to_thread(os.path.isfile, path)


__all__ = ["LocalFileIO"]
