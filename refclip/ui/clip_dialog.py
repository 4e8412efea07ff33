"""Clip details form: author a new clip or annotate an existing one.

A new clip starts from ``create_default_clip`` with a fresh id and takes its
interval from the pending marks (or the playhead). Edits are committed as a
``ClipUpdate``; blank optional fields are cleared, ``id`` and ``created_on``
are kept.
"""

from __future__ import annotations

import dataclasses
from typing import List, Optional

from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QDoubleSpinBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QVBoxLayout,
)

from ..core.calls import CallCategory, get_call_by_id, get_calls_by_category
from ..core.clip import (
    ANNOTATION_KEYS,
    Clip,
    ClipUpdate,
    create_default_clip,
    generate_clip_id,
    is_valid_clip,
)
from ..core.store import ProjectStore

CALL_TYPES = ("Call", "Non-Call", "Missed Call")
OFFICIAL_POSITIONS = ("Lead", "Trail", "Center")
ASSESSMENTS = ("Yes", "No", "Maybe")
CALL_GROUPS = (
    ("Fouls", CallCategory.FOUL),
    ("Violations", CallCategory.VIOLATION),
    ("Miscellaneous", CallCategory.MISCELLANEOUS),
)
MAX_SECONDS = 1_000_000.0
SPIN_DECIMALS = 3


def _choiceCombo(options) -> QComboBox:
    combo = QComboBox()
    combo.addItem("Select...", None)
    for value in options:
        combo.addItem(value, value)
    return combo


def _setChoice(combo: QComboBox, value: Optional[str]):
    idx = combo.findData(value) if value is not None else 0
    combo.setCurrentIndex(max(idx, 0))


def _text(value: str) -> Optional[str]:
    value = value.strip()
    return value or None


class ClipDetailsDialog(QDialog):
    def __init__(self, store: ProjectStore, clip: Optional[Clip] = None, parent=None):
        super().__init__(parent)
        self.store = store
        self.clip = clip
        self.setWindowTitle("Edit Clip" if clip is not None else "New Clip")
        if clip is None:
            base = create_default_clip()
            base.id = generate_clip_id()
            now_t = store.current_time
            base.in_seconds = store.in_mark if store.in_mark is not None else now_t
            base.out_seconds = store.out_mark if store.out_mark is not None else now_t
        else:
            base = clip
        self._base = base

        self.name_edit = QLineEdit()
        self.name_edit.setPlaceholderText("Enter clip name")
        self.in_spin = QDoubleSpinBox()
        self.out_spin = QDoubleSpinBox()
        for spin in (self.in_spin, self.out_spin):
            spin.setDecimals(SPIN_DECIMALS)
            spin.setRange(0.0, MAX_SECONDS)
            spin.setSuffix(" s")
        self.period_edit = QLineEdit()
        self.period_edit.setPlaceholderText("e.g., Q1, 2nd Half")
        self.clock_edit = QLineEdit()
        self.clock_edit.setPlaceholderText("e.g., 4:32")
        self.description_edit = QPlainTextEdit()
        self.description_edit.setFixedHeight(60)

        self.call_combo = QComboBox()
        self.call_combo.addItem("No call", None)
        for label, category in CALL_GROUPS:
            for call in get_calls_by_category(category):
                self.call_combo.addItem(f"{label}: {call.call_name}", call.id)
        self.call_type_combo = _choiceCombo(CALL_TYPES)
        self.official_name_edit = QLineEdit()
        self.official_name_edit.setPlaceholderText("Official's name")
        self.position_combo = _choiceCombo(OFFICIAL_POSITIONS)

        self.shooting_check = QCheckBox("Shooting foul")
        self.whistles_check = QCheckBox("Multiple whistles")
        self.review_check = QCheckBox("Flag for review")
        self.decision_combo = _choiceCombo(ASSESSMENTS)
        self.position_ok_combo = _choiceCombo(ASSESSMENTS)

        self.tags_edit = QLineEdit()
        self.tags_edit.setPlaceholderText("Comma-separated tags")
        self.comments_edit = QPlainTextEdit()
        self.comments_edit.setFixedHeight(60)

        times = QHBoxLayout()
        times.addWidget(QLabel("In"))
        times.addWidget(self.in_spin)
        times.addWidget(QLabel("Out"))
        times.addWidget(self.out_spin)
        flags = QHBoxLayout()
        for check in (self.shooting_check, self.whistles_check, self.review_check):
            flags.addWidget(check)

        form = QFormLayout()
        form.addRow("Name", self.name_edit)
        form.addRow("Time", times)
        form.addRow("Period", self.period_edit)
        form.addRow("Clock", self.clock_edit)
        form.addRow("Description", self.description_edit)
        form.addRow("Call", self.call_combo)
        form.addRow("Call type", self.call_type_combo)
        form.addRow("Official", self.official_name_edit)
        form.addRow("Position", self.position_combo)
        form.addRow(flags)
        form.addRow("Correct decision", self.decision_combo)
        form.addRow("Correct position", self.position_ok_combo)
        form.addRow("Tags", self.tags_edit)
        form.addRow("Comments", self.comments_edit)

        self.error_label = QLabel()
        self.error_label.setStyleSheet("color:#d33;")
        self.error_label.setWordWrap(True)

        buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self._onSave)
        buttons.rejected.connect(self.reject)

        layout = QVBoxLayout()
        layout.addLayout(form)
        layout.addWidget(self.error_label)
        layout.addWidget(buttons)
        self.setLayout(layout)

        self._populate(base)

    def _populate(self, clip: Clip):
        self.name_edit.setText(clip.name)
        self.in_spin.setValue(clip.in_seconds)
        self.out_spin.setValue(clip.out_seconds)
        self.period_edit.setText(clip.period or "")
        self.clock_edit.setText(clip.clock_time or "")
        self.description_edit.setPlainText(clip.description or "")
        idx = self.call_combo.findData(clip.call.id) if clip.call is not None else 0
        if idx < 0:  # call from a file that is not in the catalog
            self.call_combo.addItem(f"{clip.call.call_category_id.value}: {clip.call.call_name}", clip.call.id)
            idx = self.call_combo.count() - 1
        self.call_combo.setCurrentIndex(idx)
        _setChoice(self.call_type_combo, clip.call_type)
        self.official_name_edit.setText(clip.official_name or "")
        _setChoice(self.position_combo, clip.official_position)
        self.shooting_check.setChecked(bool(clip.was_shooting))
        self.whistles_check.setChecked(bool(clip.was_multiple_whistles))
        self.review_check.setChecked(bool(clip.should_review))
        _setChoice(self.decision_combo, clip.was_correct_decision)
        _setChoice(self.position_ok_combo, clip.was_correct_official_position)
        self.tags_edit.setText(clip.tags or "")
        self.comments_edit.setPlainText(clip.comments or "")

    def _seconds(self, spin: QDoubleSpinBox, previous: float) -> float:
        # the spin box shows rounded values; keep full precision when untouched
        if round(previous, SPIN_DECIMALS) == spin.value():
            return previous
        return spin.value()

    def _flag(self, check: QCheckBox, previous: Optional[bool]) -> Optional[bool]:
        # an untouched flag stays unset
        if check.isChecked():
            return True
        return False if previous is not None else None

    def _call(self, call_id):
        if call_id is None:
            return None
        if self._base.call is not None and self._base.call.id == call_id:
            return self._base.call
        return get_call_by_id(call_id)

    def candidateClip(self) -> Clip:
        """The clip as the form currently describes it (not yet committed)."""
        base = self._base
        call_id = self.call_combo.currentData()
        return dataclasses.replace(
            base,
            name=self.name_edit.text().strip(),
            in_seconds=self._seconds(self.in_spin, base.in_seconds),
            out_seconds=self._seconds(self.out_spin, base.out_seconds),
            period=_text(self.period_edit.text()),
            clock_time=_text(self.clock_edit.text()),
            description=_text(self.description_edit.toPlainText()),
            call=self._call(call_id),
            call_type=self.call_type_combo.currentData(),
            official_name=_text(self.official_name_edit.text()),
            official_position=self.position_combo.currentData(),
            was_shooting=self._flag(self.shooting_check, base.was_shooting),
            was_multiple_whistles=self._flag(self.whistles_check, base.was_multiple_whistles),
            should_review=self._flag(self.review_check, base.should_review),
            was_correct_decision=self.decision_combo.currentData(),
            was_correct_official_position=self.position_ok_combo.currentData(),
            tags=_text(self.tags_edit.text()),
            comments=_text(self.comments_edit.toPlainText()),
        )

    def validationErrors(self) -> List[str]:
        clip = self.candidateClip()
        errors = []
        if not clip.name:
            errors.append("Name is required")
        if clip.in_seconds < 0:
            errors.append("In time cannot be negative")
        if clip.out_seconds < 0:
            errors.append("Out time cannot be negative")
        if clip.out_seconds <= clip.in_seconds:
            errors.append("Out time must be greater than In time")
        if not errors and not is_valid_clip(clip):
            errors.append("Clip details are invalid")
        return errors

    def clipUpdate(self) -> ClipUpdate:
        """Form contents as an update of ``self.clip``; emptied fields are cleared."""
        clip = self.candidateClip()
        values = {
            name: getattr(clip, name)
            for name in ("name", "in_seconds", "out_seconds", *ANNOTATION_KEYS)
            if getattr(clip, name) is not None
        }
        cleared = tuple(
            name
            for name in ANNOTATION_KEYS
            if getattr(clip, name) is None and getattr(self.clip, name) is not None
        )
        return ClipUpdate(clear=cleared, **values)

    def _onSave(self):
        errors = self.validationErrors()
        if errors:
            self.error_label.setText("\n".join(errors))
            return
        if self.clip is None:
            self.store.add_clip(self.candidateClip())
            self.store.clear_marks()
        else:
            self.store.update_clip(self.clip.id, self.clipUpdate())
        self.accept()


__all__ = ["ClipDetailsDialog"]
