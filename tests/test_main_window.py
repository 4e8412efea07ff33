from PySide6.QtWidgets import QApplication, QMessageBox
from PySide6.QtCore import QEventLoop, QTimer, Qt
from moviepy import ColorClip
import pytest

from refclip.config import AppConfig
from refclip.core.store import ProjectStore
from refclip.ui import main_window
from refclip.ui.main_window import MainWindow

_app = None


def _ensure_app():
    global _app
    if _app is None:
        _app = QApplication.instance() or QApplication([])


def _process_events(ms=50):
    loop = QEventLoop()
    QTimer.singleShot(ms, loop.quit)
    loop.exec()


@pytest.fixture
def video_path(tmp_path):
    path = tmp_path / "game.mp4"
    clip = ColorClip(size=(48, 24), color=(0, 0, 255), duration=1.0)
    clip.write_videofile(str(path), fps=24)
    clip.close()
    return str(path)


def test_window_starts_untitled():
    _ensure_app()
    win = MainWindow(store=ProjectStore(), config=AppConfig())
    assert win.windowTitle() == "RefClip - Untitled"
    assert win.clip_list.count() == 0


def test_mark_and_add_clip_from_window(video_path):
    _ensure_app()
    store = ProjectStore()
    win = MainWindow(store=store, config=AppConfig())
    win.loadVideo(video_path)
    _process_events()
    assert store.video_source.path == video_path
    assert store.video_source.duration == pytest.approx(1.0, abs=0.1)
    pix = win.preview.pixmap()
    assert pix is not None and not pix.isNull()

    win.controller.seek(0.25)
    win.mark_in_btn.click()
    win.controller.seek(0.75)
    win.mark_out_btn.click()
    assert "00:00.250" in win.statusBar().currentMessage()
    win.add_clip_btn.click()

    assert len(store.clips) == 1
    assert store.clips[0].in_seconds == pytest.approx(0.25)
    assert store.clips[0].out_seconds == pytest.approx(0.75)
    assert win.clip_list.count() == 1
    assert win.clip_list.item(0).text().startswith("Clip 1  00:00:00.25")
    assert win.windowTitle().endswith("*")


def test_checking_a_clip_selects_it():
    _ensure_app()
    store = ProjectStore()
    win = MainWindow(store=store, config=AppConfig())
    store.mark_in(1.0)
    store.mark_out(2.0)
    clip = store.add_clip_from_marks()
    win.clip_list.item(0).setCheckState(Qt.Checked)
    assert store.is_selected(clip.id)
    assert win.clip_list.item(0).checkState() == Qt.Checked
    win.clip_list.item(0).setCheckState(Qt.Unchecked)
    assert not store.is_selected(clip.id)


class _Confirm:
    StandardButton = QMessageBox.StandardButton

    def __init__(self, answer):
        self.answer = answer
        self.asked = []

    def question(self, parent, title, text):
        self.asked.append(text)
        return self.answer


def _window_with_clip():
    store = ProjectStore()
    win = MainWindow(store=store, config=AppConfig())
    store.mark_in(1.0)
    store.mark_out(2.0)
    clip = store.add_clip_from_marks()
    win.clip_list.setCurrentRow(0)
    return store, win, clip


def test_delete_asks_before_removing(monkeypatch):
    _ensure_app()
    store, win, clip = _window_with_clip()
    confirm = _Confirm(QMessageBox.StandardButton.No)
    monkeypatch.setattr(main_window, "QMessageBox", confirm)
    win._deleteCurrentClip()
    assert confirm.asked == ["Are you sure you want to delete 'Clip 1'?"]
    assert [c.id for c in store.clips] == [clip.id]

    confirm.answer = QMessageBox.StandardButton.Yes
    win._deleteCurrentClip()
    assert store.clips == []
    assert win.clip_list.count() == 0


def test_double_click_opens_clip_editor(monkeypatch):
    _ensure_app()
    store, win, clip = _window_with_clip()
    opened = []

    class _Dialog:
        def __init__(self, store, clip, parent):
            opened.append(clip)

        def exec(self):
            return 0

    monkeypatch.setattr(main_window, "ClipDetailsDialog", _Dialog)
    win.editClip(win.clip_list.item(0))
    win.newClip()
    assert opened == [clip, None]
