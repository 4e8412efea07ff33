"""Video playback engine and preview widget.

VideoPlaybackController decodes with MoviePy and exposes:
    load(path)
    play() / pause() / stop()
    seek(seconds)
    set_rate(rate)
    position() -> float
    current_playback_seconds() -> float   # PlaybackClock for mark in/out
Signals:
    frameReady(np.ndarray, float)   # frame array + timestamp seconds
    positionChanged(float)
    stateChanged(str)               # 'stopped'|'playing'|'paused'
    clipLoaded(float)               # duration

Playback is driven by a QTimer on the GUI thread. Each tick derives the target
time from wall-clock elapsed time times the rate, so slow decoding drops
frames instead of drifting.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from time import perf_counter
from typing import Optional

from moviepy import VideoFileClip
from PIL import Image
from PySide6.QtCore import QObject, QSize, Qt, QTimer, Signal
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import QLabel, QSizePolicy

logger = logging.getLogger(__name__)

MIN_RATE = 0.1
MAX_RATE = 4.0


def read_duration(path: str) -> Optional[float]:
    """Duration of the video at ``path`` in seconds, or None if it can't be read."""
    try:
        clip = VideoFileClip(path)
    except Exception as e:  # MoviePy surfaces ffmpeg failures as several types
        logger.warning("could not read duration of %s: %s", path, e)
        return None
    try:
        return float(clip.duration) if clip.duration else None
    finally:
        clip.close()


@dataclass
class PlaybackState:
    playing: bool = False
    position: float = 0.0
    duration: float = 0.0
    fps: float = 0.0
    rate: float = 1.0


class VideoPlaybackController(QObject):
    frameReady = Signal(object, float)  # (numpy array, t seconds)
    positionChanged = Signal(float)
    stateChanged = Signal(str)
    clipLoaded = Signal(float)  # duration

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._clip: Optional[VideoFileClip] = None
        self._state = PlaybackState()
        self._timer = QTimer(self)
        self._timer.setTimerType(Qt.PreciseTimer)
        self._timer.timeout.connect(self._tick)
        # wall-clock anchor: (perf_counter at anchor, media position at anchor)
        self._anchor: Optional[tuple] = None

    @property
    def is_loaded(self) -> bool:
        return self._clip is not None

    @property
    def is_playing(self) -> bool:
        return self._state.playing

    def load(self, path: str):
        self.close()
        self._clip = VideoFileClip(path)
        self._state = PlaybackState(
            duration=float(self._clip.duration or 0.0),
            fps=float(self._clip.fps or 24.0),
        )
        logger.info("loaded %s (%.2fs @ %.2f fps)", path, self._state.duration, self._state.fps)
        self.clipLoaded.emit(self._state.duration)
        self.stateChanged.emit("stopped")
        self.seek(0.0)

    def close(self):
        self._timer.stop()
        self._anchor = None
        if self._clip is not None:
            self._clip.close()
            self._clip = None
        self._state = PlaybackState()

    def duration(self) -> float:
        return self._state.duration

    def position(self) -> float:
        return self._state.position

    def current_playback_seconds(self) -> float:
        return self._state.position

    def rate(self) -> float:
        return self._state.rate

    def set_rate(self, rate: float):
        rate = max(MIN_RATE, min(float(rate), MAX_RATE))
        if self._state.playing:
            self._anchor = (perf_counter(), self._state.position)
        self._state.rate = rate

    def play(self):
        if self._clip is None:
            return
        if self._state.position >= self._last_frame_time():
            self._state.position = 0.0
        self._anchor = (perf_counter(), self._state.position)
        if not self._timer.isActive():
            self._timer.start(max(1, int(1000 / (self._state.fps * self._state.rate))))
        self._state.playing = True
        self.stateChanged.emit("playing")

    def pause(self):
        self._timer.stop()
        self._anchor = None
        self._state.playing = False
        self.stateChanged.emit("paused")

    def stop(self):
        self.pause()
        self.seek(0.0)
        self.stateChanged.emit("stopped")

    def seek(self, t: float, emit_frame: bool = True):
        if self._clip is None:
            return
        self._state.position = max(0.0, min(float(t), self._last_frame_time()))
        if self._state.playing:
            self._anchor = (perf_counter(), self._state.position)
        if emit_frame:
            self._emit_current_frame()
        self.positionChanged.emit(self._state.position)

    # Internal
    def _last_frame_time(self) -> float:
        if self._state.fps <= 0:
            return self._state.duration
        return max(0.0, self._state.duration - 1.0 / self._state.fps)

    def _emit_current_frame(self):
        t = self._state.position
        self.frameReady.emit(self._clip.get_frame(t), t)

    def _tick(self):
        if self._clip is None or self._anchor is None:
            self._timer.stop()
            return
        started_at, start_pos = self._anchor
        target = start_pos + (perf_counter() - started_at) * self._state.rate
        if target >= self._last_frame_time():
            self.pause()
            self.seek(self._last_frame_time())
            return
        self._state.position = target
        self._emit_current_frame()
        self.positionChanged.emit(target)


class VideoPreviewWidget(QLabel):
    """QLabel preview that renders the controller's frames scaled to fit."""

    def __init__(self, controller: VideoPlaybackController, parent=None):
        super().__init__(parent)
        self.setAlignment(Qt.AlignCenter)
        self.setStyleSheet("background:#222;color:#fff;font-size:24px;")
        self.setText("Open a video to start")
        controller.frameReady.connect(self._onFrame)
        self._last_image: Optional[QImage] = None
        # Ignored size policy lets the layout shrink the label below the pixmap size.
        self.setSizePolicy(QSizePolicy.Ignored, QSizePolicy.Ignored)

    def sizeHint(self):  # type: ignore[override]
        return QSize(320, 180)

    def _onFrame(self, frame, t: float):
        if frame is None:
            return
        # Pillow normalizes grayscale/RGBA decoder output to packed RGB.
        image = Image.fromarray(frame).convert("RGB")
        data = image.tobytes()
        qimg = QImage(data, image.width, image.height, image.width * 3, QImage.Format.Format_RGB888)
        self._last_image = qimg.copy()  # detach from the bytes buffer
        self._render()

    def _render(self):
        if self._last_image is None or self.width() <= 0 or self.height() <= 0:
            return
        scaled = self._last_image.scaled(
            self.width(), self.height(), Qt.KeepAspectRatio, Qt.FastTransformation
        )
        self.setPixmap(QPixmap.fromImage(scaled))

    def resizeEvent(self, event):  # noqa: D401 - Qt override
        self._render()
        super().resizeEvent(event)


__all__ = ["VideoPlaybackController", "VideoPreviewWidget", "PlaybackState", "read_duration"]
