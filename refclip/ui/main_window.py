"""Main application window (UI layer).

Thin shell over ProjectStore: every button, shortcut and menu action calls a
store or persistence operation and redraws from store state.

Layout:
+------------------------------------------+-----------------+
| Video Preview                            | Clip List       |
| [scrub slider]                           | (check=select)  |
| Play | Mark In | Mark Out | Add | Clear  |                 |
+------------------------------------------+-----------------+
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QGuiApplication, QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSlider,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from .. import __version__
from ..config import AppConfig, load_config
from ..core.errors import ProjectError
from ..core.store import ProjectStore
from ..media.playback import VideoPlaybackController, VideoPreviewWidget, read_duration
from ..services.export import ExportSettings, export_clips
from ..services.file_io import LocalFileIO
from ..services.persistence import ProjectPersistence
from ..utils.timefmt import format_time, format_timestamp
from .clip_dialog import ClipDetailsDialog
from .dialogs import QtFileDialogs
from .event_dialog import EventDetailsDialog

logger = logging.getLogger(__name__)

SLIDER_STEPS = 1000
RATES = ("0.25x", "0.5x", "1x", "1.5x", "2x")


class MainWindow(QMainWindow):
    def __init__(self, store: Optional[ProjectStore] = None, config: Optional[AppConfig] = None):
        super().__init__()
        self.config = config or load_config()
        self.store = store or ProjectStore()
        self.dialogs = QtFileDialogs(self)
        self.persistence = ProjectPersistence(self.store, self.dialogs, LocalFileIO())
        self._togglingSelection = False
        self.setGeometry(100, 100, 1100, 650)
        self._createMenuBar()
        self._createEditorLayout()
        self.store.subscribe(self.refresh)
        self.refresh()

    def centerOnPreferredScreen(self):
        """Center on REFCLIP_SCREEN_INDEX when valid, else the primary screen."""
        screens = QGuiApplication.screens()
        if not screens:
            return
        idx = self.config.screen_index
        if idx is not None and 0 <= idx < len(screens):
            screen = screens[idx]
        else:
            screen = QGuiApplication.primaryScreen() or screens[0]
        win_geo = self.frameGeometry()
        win_geo.moveCenter(screen.availableGeometry().center())
        self.move(win_geo.topLeft())

    def _createMenuBar(self):
        menu_bar = self.menuBar()
        file_menu = menu_bar.addMenu("File")
        for label, slot, shortcut in (
            ("Open Video...", self.openVideo, None),
            ("Open Project...", self.openProject, QKeySequence.Open),
            ("Save Project", lambda: self.saveProject(), QKeySequence.Save),
            ("Save Project As...", lambda: self.saveProject(save_as=True), QKeySequence.SaveAs),
            ("Export Selected Clips...", self.exportSelected, None),
        ):
            action = QAction(label, self)
            action.triggered.connect(slot)
            if shortcut is not None:
                action.setShortcut(shortcut)
            file_menu.addAction(action)
        file_menu.addSeparator()
        exit_action = QAction("Exit", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        clip_menu = menu_bar.addMenu("Clip")
        new_clip_action = QAction("New Clip...", self)
        new_clip_action.triggered.connect(self.newClip)
        clip_menu.addAction(new_clip_action)
        edit_clip_action = QAction("Edit Clip...", self)
        edit_clip_action.triggered.connect(lambda: self.editClip(self.clip_list.currentItem()))
        clip_menu.addAction(edit_clip_action)
        delete_clip_action = QAction("Delete Clip", self)
        delete_clip_action.triggered.connect(self._deleteCurrentClip)
        clip_menu.addAction(delete_clip_action)

        event_menu = menu_bar.addMenu("Event")
        event_action = QAction("Event Details...", self)
        event_action.triggered.connect(self.editEvent)
        event_menu.addAction(event_action)

        about_menu = menu_bar.addMenu("About")
        about_action = QAction("About RefClip", self)
        about_action.triggered.connect(self._showAboutDialog)
        about_menu.addAction(about_action)

    def _showAboutDialog(self):
        QMessageBox.about(
            self,
            "About RefClip",
            f"RefClip {__version__}\nMark and annotate officiating clips in game video.",
        )

    def _createEditorLayout(self):
        self.controller = VideoPlaybackController(self)
        self.preview = VideoPreviewWidget(self.controller)

        self.scrub = QSlider(Qt.Horizontal)
        self.scrub.setRange(0, SLIDER_STEPS)
        self.time_label = QLabel(format_timestamp(0.0))

        self.play_btn = QPushButton("Play")
        self.mark_in_btn = QPushButton("Mark In")
        self.mark_out_btn = QPushButton("Mark Out")
        self.add_clip_btn = QPushButton("Add Clip")
        self.clear_marks_btn = QPushButton("Clear Marks")
        self.rate_combo = QComboBox()
        self.rate_combo.addItems(RATES)
        self.rate_combo.setCurrentText("1x")

        controls = QHBoxLayout()
        for w in (
            self.play_btn,
            self.rate_combo,
            self.mark_in_btn,
            self.mark_out_btn,
            self.add_clip_btn,
            self.clear_marks_btn,
        ):
            controls.addWidget(w)
        controls.addStretch(1)
        controls.addWidget(self.time_label)

        left = QWidget()
        left_layout = QVBoxLayout()
        left_layout.setContentsMargins(0, 0, 0, 0)
        left_layout.addWidget(self.preview, stretch=1)
        left_layout.addWidget(self.scrub)
        left_layout.addLayout(controls)
        left.setLayout(left_layout)

        self.clip_list = QListWidget()
        self.clip_list.setToolTip("Check clips to select them for export; double-click to edit")

        splitter = QSplitter()
        splitter.setOrientation(Qt.Horizontal)  # type: ignore
        splitter.addWidget(left)
        splitter.addWidget(self.clip_list)
        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 1)
        self.setCentralWidget(splitter)

        # wiring
        self.play_btn.clicked.connect(self.togglePlay)
        self.mark_in_btn.clicked.connect(lambda: self.store.mark_in())
        self.mark_out_btn.clicked.connect(lambda: self.store.mark_out())
        self.add_clip_btn.clicked.connect(self.store.add_clip_from_marks)
        self.clear_marks_btn.clicked.connect(self.store.clear_marks)
        self.rate_combo.currentTextChanged.connect(
            lambda text: self.controller.set_rate(float(text.rstrip("x")))
        )
        self.scrub.sliderMoved.connect(self._onScrubMoved)
        self.controller.positionChanged.connect(self._onPositionChanged)
        self.controller.stateChanged.connect(
            lambda state: self.play_btn.setText("Pause" if state == "playing" else "Play")
        )
        self.clip_list.itemChanged.connect(self._onClipItemChanged)
        self.clip_list.itemDoubleClicked.connect(self.editClip)

        QShortcut(QKeySequence("I"), self, activated=lambda: self.store.mark_in())
        QShortcut(QKeySequence("O"), self, activated=lambda: self.store.mark_out())
        QShortcut(QKeySequence(Qt.Key_Return), self, activated=self.store.add_clip_from_marks)
        QShortcut(QKeySequence(Qt.Key_Escape), self, activated=self.store.clear_marks)
        QShortcut(QKeySequence(Qt.Key_Space), self, activated=self.togglePlay)
        QShortcut(QKeySequence.Delete, self.clip_list, activated=self._deleteCurrentClip)

    # --- state -> widgets ---
    def refresh(self):
        name = os.path.basename(self.store.project_path) if self.store.project_path else "Untitled"
        self.setWindowTitle(f"RefClip - {name}{' *' if self.store.dirty else ''}")
        if not self._togglingSelection:
            self._refreshClipList()
        self._refreshMarks()

    def _refreshClipList(self):
        self.clip_list.blockSignals(True)
        try:
            self.clip_list.clear()
            for clip in self.store.clips:
                text = (
                    f"{clip.name}  {format_timestamp(clip.in_seconds)} - "
                    f"{format_timestamp(clip.out_seconds)}"
                )
                item = QListWidgetItem(text)
                item.setData(Qt.UserRole, clip.id)
                item.setFlags(item.flags() | Qt.ItemIsUserCheckable)
                item.setCheckState(
                    Qt.Checked if self.store.is_selected(clip.id) else Qt.Unchecked
                )
                self.clip_list.addItem(item)
        finally:
            self.clip_list.blockSignals(False)

    def _refreshMarks(self):
        in_t, out_t = self.store.in_mark, self.store.out_mark
        if in_t is None and out_t is None:
            self.statusBar().showMessage("")
            return
        in_s = format_time(in_t) if in_t is not None else "--"
        out_s = format_time(out_t) if out_t is not None else "--"
        self.statusBar().showMessage(f"Marks: {in_s} to {out_s}")

    # --- transport ---
    def togglePlay(self):
        if self.controller.is_playing:
            self.controller.pause()
        else:
            self.controller.play()

    def _onScrubMoved(self, value: int):
        duration = self.controller.duration()
        if duration > 0:
            self.controller.seek(duration * value / SLIDER_STEPS)

    def _onPositionChanged(self, t: float):
        self.store.set_current_time(t)
        self.time_label.setText(format_timestamp(t))
        duration = self.controller.duration()
        if duration > 0 and not self.scrub.isSliderDown():
            self.scrub.blockSignals(True)
            self.scrub.setValue(int(SLIDER_STEPS * t / duration))
            self.scrub.blockSignals(False)

    # --- clip list ---
    def _onClipItemChanged(self, item: QListWidgetItem):
        clip_id = item.data(Qt.UserRole)
        checked = item.checkState() == Qt.Checked
        if checked != self.store.is_selected(clip_id):
            # the item already shows the new state; rebuilding here would delete it mid-signal
            self._togglingSelection = True
            try:
                self.store.toggle_selection(clip_id)
            finally:
                self._togglingSelection = False

    def newClip(self):
        ClipDetailsDialog(self.store, None, self).exec()

    def editClip(self, item: Optional[QListWidgetItem]):
        if item is None:
            return
        clip = self.store.repository.get(item.data(Qt.UserRole))
        if clip is not None:
            ClipDetailsDialog(self.store, clip, self).exec()

    def _deleteCurrentClip(self):
        item = self.clip_list.currentItem()
        if item is None:
            return
        clip = self.store.repository.get(item.data(Qt.UserRole))
        if clip is None:
            return
        answer = QMessageBox.question(
            self, "Delete Clip", f"Are you sure you want to delete '{clip.name}'?"
        )
        if answer == QMessageBox.StandardButton.Yes:
            self.store.delete_clip(clip.id)

    # --- file / project actions ---
    def _run(self, coro):
        """Run a persistence coroutine; ProjectErrors become message boxes."""
        try:
            return asyncio.run(coro)
        except ProjectError as e:
            QMessageBox.warning(self, "RefClip", str(e))
            return None

    def openVideo(self):
        path = asyncio.run(self.dialogs.pick_video_to_open())
        if not path:
            return
        self.loadVideo(path)

    def loadVideo(self, path: str, register: bool = True):
        try:
            self.controller.load(path)
        except Exception as e:  # decoder errors come from ffmpeg via MoviePy
            logger.exception("failed to load video %s", path)
            QMessageBox.critical(self, "Error", f"Failed to load video: {e}")
            return
        if register:
            duration = self.controller.duration() or read_duration(path)
            self.store.set_video_source(path, duration)

    def openProject(self):
        if self._run(self.persistence.load()):
            self.loadVideo(self.store.video_source.path, register=False)

    def openProjectPath(self, path: str):
        if self._run(self.persistence.load_path(path)):
            self.loadVideo(self.store.video_source.path, register=False)

    def saveProject(self, save_as: bool = False):
        if self._run(self.persistence.save(save_as=save_as)):
            self.statusBar().showMessage(f"Saved {self.store.project_path}", 4000)

    def editEvent(self):
        EventDetailsDialog(self.store, self).exec()

    def exportSelected(self):
        clips = self.store.selected_clips()
        if not self.store.has_video or not clips:
            QMessageBox.information(self, "Export", "Select at least one clip to export.")
            return
        output_dir = self.config.export_dir or asyncio.run(self.dialogs.pick_directory())
        if not output_dir:
            return
        settings = ExportSettings(output_dir=output_dir, ffmpeg_binary=self.config.ffmpeg_binary)
        count = export_clips(self.store.video_source.path, clips, settings)
        self.statusBar().showMessage(f"Queued {count} clip export(s)", 4000)

    def closeEvent(self, event):  # type: ignore[override]
        self.controller.close()
        super().closeEvent(event)


__all__ = ["MainWindow"]
