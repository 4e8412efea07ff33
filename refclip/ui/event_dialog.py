"""Event details form.

Edits the project's Event through ``ProjectStore.update_event``. The form is
validated with ``validate_event_details`` before anything is written; rows of
the crew table without a name are dropped.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List

from PySide6.QtCore import QDate
from PySide6.QtWidgets import (
    QComboBox,
    QDateEdit,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
)

from ..core.event import (
    OPTIONAL_TEXT_KEYS,
    AgeLevel,
    Event,
    EventUpdate,
    Gender,
    Official,
    Sport,
    validate_event_details,
)
from ..core.store import ProjectStore


class EventDetailsDialog(QDialog):
    def __init__(self, store: ProjectStore, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Event Details")
        self.store = store

        self.date_edit = QDateEdit()
        self.date_edit.setCalendarPopup(True)
        self.date_edit.setDisplayFormat("yyyy-MM-dd")
        self.gender_combo = QComboBox()
        self.gender_combo.addItems([g.value for g in Gender])
        self.age_combo = QComboBox()
        self.age_combo.addItems([a.value for a in AgeLevel])
        self.sport_combo = QComboBox()
        self.sport_combo.addItems([s.value for s in Sport])
        self.text_edits = {attr: QLineEdit() for attr in OPTIONAL_TEXT_KEYS if attr != "notes"}
        self.notes_edit = QPlainTextEdit()
        self.notes_edit.setFixedHeight(60)

        self.crew_table = QTableWidget(0, 2)
        self.crew_table.setHorizontalHeaderLabels(["Name", "Position"])
        self.crew_table.horizontalHeader().setStretchLastSection(True)
        add_btn = QPushButton("Add Official")
        remove_btn = QPushButton("Remove Official")
        add_btn.clicked.connect(lambda: self.addOfficialRow())
        remove_btn.clicked.connect(self._removeOfficialRow)

        form = QFormLayout()
        form.addRow("Date", self.date_edit)
        form.addRow("Gender", self.gender_combo)
        form.addRow("Age level", self.age_combo)
        form.addRow("Sport", self.sport_combo)
        form.addRow("Event name", self.text_edits["event_name"])
        form.addRow("Location", self.text_edits["location"])
        form.addRow("Home team", self.text_edits["home_team"])
        form.addRow("Away team", self.text_edits["away_team"])
        form.addRow("Video link", self.text_edits["video_link"])
        form.addRow("Notes", self.notes_edit)

        crew_buttons = QHBoxLayout()
        crew_buttons.addWidget(add_btn)
        crew_buttons.addWidget(remove_btn)

        self.error_label = QLabel()
        self.error_label.setStyleSheet("color:#d33;")
        self.error_label.setWordWrap(True)

        buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self._onSave)
        buttons.rejected.connect(self.reject)

        layout = QVBoxLayout()
        layout.addLayout(form)
        layout.addWidget(QLabel("Officiating crew"))
        layout.addWidget(self.crew_table)
        layout.addLayout(crew_buttons)
        layout.addWidget(self.error_label)
        layout.addWidget(buttons)
        self.setLayout(layout)

        self._populate(store.event)

    def _populate(self, event: Event | None):
        if event is None:
            self.date_edit.setDate(QDate.currentDate())
            self.addOfficialRow()
            return
        d = event.date
        self.date_edit.setDate(QDate(d.year, d.month, d.day))
        self.gender_combo.setCurrentText(event.gender.value)
        self.age_combo.setCurrentText(event.age_level.value)
        self.sport_combo.setCurrentText(event.sport.value)
        for attr, edit in self.text_edits.items():
            edit.setText(getattr(event, attr) or "")
        self.notes_edit.setPlainText(event.notes or "")
        for official in event.officiating_crew:
            self.addOfficialRow(official.name, official.position or "")
        if not event.officiating_crew:
            self.addOfficialRow()

    def addOfficialRow(self, name: str = "", position: str = ""):
        row = self.crew_table.rowCount()
        self.crew_table.insertRow(row)
        self.crew_table.setItem(row, 0, QTableWidgetItem(name))
        self.crew_table.setItem(row, 1, QTableWidgetItem(position))

    def _removeOfficialRow(self):
        # keep at least one row to type into
        if self.crew_table.rowCount() > 1:
            row = self.crew_table.currentRow()
            self.crew_table.removeRow(row if row >= 0 else self.crew_table.rowCount() - 1)

    def _crew(self) -> List[Official]:
        crew = []
        for row in range(self.crew_table.rowCount()):
            name_item = self.crew_table.item(row, 0)
            pos_item = self.crew_table.item(row, 1)
            name = name_item.text().strip() if name_item else ""
            position = pos_item.text().strip() if pos_item else ""
            if name:
                crew.append(Official(name=name, position=position or None))
        return crew

    def eventUpdate(self) -> EventUpdate:
        """Form contents as a full update; blank optional fields are cleared."""
        qd = self.date_edit.date()
        values = {attr: edit.text().strip() for attr, edit in self.text_edits.items()}
        values["notes"] = self.notes_edit.toPlainText().strip()
        filled = {k: v for k, v in values.items() if v}
        return EventUpdate(
            date=datetime(qd.year(), qd.month(), qd.day(), tzinfo=timezone.utc),
            gender=Gender(self.gender_combo.currentText()),
            age_level=AgeLevel(self.age_combo.currentText()),
            sport=Sport(self.sport_combo.currentText()),
            officiating_crew=self._crew(),
            clear=tuple(k for k, v in values.items() if not v),
            **filled,
        )

    def validationErrors(self) -> List[str]:
        update = self.eventUpdate()
        candidate = Event(**update.values())
        return validate_event_details(candidate)

    def _onSave(self):
        errors = self.validationErrors()
        if errors:
            self.error_label.setText("\n".join(errors))
            return
        self.store.update_event(self.eventUpdate())
        self.accept()


__all__ = ["EventDetailsDialog"]
