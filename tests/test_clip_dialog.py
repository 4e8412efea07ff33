from PySide6.QtWidgets import QApplication, QDialog

from refclip.core.calls import CALLS, Call, CallCategory, get_call_by_id
from refclip.core.clip import ClipUpdate
from refclip.core.store import ProjectStore
from refclip.ui.clip_dialog import ClipDetailsDialog

_app = None


def _ensure_app():
    global _app
    if _app is None:
        _app = QApplication.instance() or QApplication([])


def _store_with_clip():
    store = ProjectStore()
    store.mark_in(2.0)
    store.mark_out(4.5)
    clip = store.add_clip_from_marks()
    return store, clip


def test_new_clip_starts_from_marks():
    _ensure_app()
    store = ProjectStore()
    store.mark_in(3.25)
    store.mark_out(6.5)
    dialog = ClipDetailsDialog(store)
    assert dialog.windowTitle() == "New Clip"
    assert dialog.in_spin.value() == 3.25
    assert dialog.out_spin.value() == 6.5
    assert dialog.name_edit.text() == ""
    assert dialog.candidateClip().id


def test_new_clip_without_marks_uses_playhead():
    _ensure_app()
    store = ProjectStore()
    store.set_current_time(7.0)
    dialog = ClipDetailsDialog(store)
    assert dialog.in_spin.value() == 7.0
    assert dialog.out_spin.value() == 7.0


def test_call_picker_lists_catalog():
    _ensure_app()
    dialog = ClipDetailsDialog(ProjectStore())
    assert dialog.call_combo.count() == len(CALLS) + 1
    assert dialog.call_combo.itemData(0) is None
    assert dialog.call_combo.itemText(1).startswith("Fouls: ")
    assert dialog.call_combo.itemText(dialog.call_combo.count() - 1).startswith("Miscellaneous: ")


def test_dialog_rejects_missing_name_and_bad_interval():
    _ensure_app()
    store = ProjectStore()
    store.mark_in(5.0)
    store.mark_out(5.5)
    dialog = ClipDetailsDialog(store)
    dialog.out_spin.setValue(4.0)
    assert dialog.validationErrors() == [
        "Name is required",
        "Out time must be greater than In time",
    ]
    dialog._onSave()
    assert store.clips == []
    assert store.in_mark == 5.0
    assert "Name is required" in dialog.error_label.text()


def test_new_clip_is_added_and_marks_cleared():
    _ensure_app()
    store = ProjectStore()
    store.mark_in(1.0)
    store.mark_out(2.0)
    dialog = ClipDetailsDialog(store)
    dialog.name_edit.setText("  Block at the rim ")
    dialog.call_combo.setCurrentIndex(dialog.call_combo.findData(1))
    dialog.call_type_combo.setCurrentIndex(dialog.call_type_combo.findData("Call"))
    dialog.position_combo.setCurrentIndex(dialog.position_combo.findData("Lead"))
    dialog.shooting_check.setChecked(True)
    dialog.tags_edit.setText("block, rim")
    dialog._onSave()

    assert dialog.result() == QDialog.DialogCode.Accepted.value
    assert len(store.clips) == 1
    clip = store.clips[0]
    assert clip.name == "Block at the rim"
    assert (clip.in_seconds, clip.out_seconds) == (1.0, 2.0)
    assert clip.call == get_call_by_id(1)
    assert clip.call_type == "Call"
    assert clip.official_position == "Lead"
    assert clip.was_shooting is True
    # untouched flags stay unset
    assert clip.was_multiple_whistles is None
    assert clip.should_review is None
    assert clip.was_correct_decision is None
    assert clip.tags == "block, rim"
    assert store.in_mark is None and store.out_mark is None
    assert store.dirty


def test_edit_keeps_identity_and_clears_blanked_fields():
    _ensure_app()
    store, clip = _store_with_clip()
    store.update_clip(
        clip.id,
        ClipUpdate(tags="late", comments="check angle", was_shooting=True, call=get_call_by_id(27)),
    )
    before = store.repository.get(clip.id).to_dict()

    dialog = ClipDetailsDialog(store, store.repository.get(clip.id))
    assert dialog.windowTitle() == "Edit Clip"
    assert dialog.call_combo.currentData() == 27
    assert dialog.shooting_check.isChecked()
    dialog.name_edit.setText("Travel on the drive")
    dialog.tags_edit.setText("   ")
    dialog.comments_edit.setPlainText("")
    dialog.shooting_check.setChecked(False)
    dialog._onSave()

    after = store.repository.get(clip.id)
    assert after.id == before["id"]
    assert after.to_dict()["createdOn"] == before["createdOn"]
    assert after.name == "Travel on the drive"
    assert (after.in_seconds, after.out_seconds) == (2.0, 4.5)
    assert after.call == get_call_by_id(27)
    assert after.tags is None
    assert after.comments is None
    assert after.was_shooting is False


def test_edit_keeps_call_missing_from_catalog():
    _ensure_app()
    store, clip = _store_with_clip()
    odd_call = Call(99, "Flagrant", CallCategory.FOUL)
    store.update_clip(clip.id, ClipUpdate(call=odd_call))

    dialog = ClipDetailsDialog(store, store.repository.get(clip.id))
    assert dialog.call_combo.currentData() == 99
    assert dialog.candidateClip().call == odd_call


def test_edit_keeps_sub_millisecond_times():
    _ensure_app()
    store = ProjectStore()
    store.mark_in(1.23456)
    store.mark_out(2.0)
    clip = store.add_clip_from_marks()
    dialog = ClipDetailsDialog(store, clip)
    assert dialog.candidateClip().in_seconds == 1.23456
