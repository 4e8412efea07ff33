import os
from datetime import datetime, timedelta, timezone

import pytest

# Qt widgets in tests render without a display server.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from refclip.core.event import EventUpdate, Official  # noqa: E402
from refclip.core.store import ProjectStore  # noqa: E402
from refclip.services.collaborators import FileResult  # noqa: E402

T0 = datetime(2025, 11, 11, 10, 30, tzinfo=timezone.utc)


class FakeClock:
    """Deterministic ``now`` that advances one second per call."""

    def __init__(self, start=T0):
        self.current = start

    def __call__(self):
        value = self.current
        self.current += timedelta(seconds=1)
        return value


class FakeDialogs:
    def __init__(self, open_path=None, save_path=None, video_path=None, directory=None):
        self.open_path = open_path
        self.save_path = save_path
        self.video_path = video_path
        self.directory = directory
        self.calls = []

    async def pick_file_to_open(self):
        self.calls.append("open")
        return self.open_path

    async def pick_video_to_open(self):
        self.calls.append("video")
        return self.video_path

    async def pick_directory(self):
        self.calls.append("directory")
        return self.directory

    async def pick_file_to_save(self):
        self.calls.append("save")
        return self.save_path


class MemoryFiles:
    """In-memory FileIOProvider; ``fail_writes``/``fail_reads`` inject errors."""

    def __init__(self, files=None):
        self.files = dict(files or {})
        self.fail_writes = None
        self.fail_reads = None
        self.writes = []

    async def read_text_file(self, path):
        if self.fail_reads:
            return FileResult.failure(self.fail_reads)
        if path not in self.files:
            return FileResult.failure(f"No such file: {path}")
        return FileResult.success(self.files[path])

    async def write_text_file(self, path, text):
        if self.fail_writes:
            return FileResult.failure(self.fail_writes)
        self.files[path] = text
        self.writes.append(path)
        return FileResult.success()

    async def file_exists(self, path):
        return path in self.files


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return ProjectStore(now=clock)


@pytest.fixture
def ready_store(store):
    """A store that passes the save gate: video open, event with a named official."""
    store.set_video_source("/videos/game.mp4", 3120.5)
    store.update_event(
        EventUpdate(home_team="Tigers", away_team="Lions", officiating_crew=[Official("Pat Doe", "Referee")])
    )
    return store


@pytest.fixture
def dialogs():
    return FakeDialogs()


@pytest.fixture
def files():
    return MemoryFiles({"/videos/game.mp4": ""})
