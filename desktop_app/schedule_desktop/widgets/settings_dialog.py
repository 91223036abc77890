"""Dialog für Routengruppen, Filtermuster und Zeitgrenzen."""

from __future__ import annotations

from typing import List, Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (QCheckBox, QDialog, QDialogButtonBox, QFormLayout,
                               QGroupBox, QHBoxLayout, QLineEdit, QPlainTextEdit,
                               QPushButton, QSpinBox, QTableWidget, QTableWidgetItem,
                               QVBoxLayout, QWidget)

from ..models import RouteGroup, TimeSettings
from ..settings_store import ScheduleSettingsStore


class ScheduleSettingsDialog(QDialog):
    """Bearbeitet die lokal gespeicherten Planungseinstellungen."""

    def __init__(self, store: ScheduleSettingsStore, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.store = store
        self.setWindowTitle("Planungseinstellungen")
        self.resize(760, 620)

        self.group_table = QTableWidget(0, 4)
        self.group_table.setHorizontalHeaderLabels(["Name", "Kürzel", "Vollständig", "Farbe"])
        self.group_table.horizontalHeader().setStretchLastSection(True)
        self.group_table.verticalHeader().setVisible(False)

        self.add_group_button = QPushButton("Gruppe hinzufügen")
        self.remove_group_button = QPushButton("Gruppe entfernen")
        self.add_group_button.clicked.connect(self._handle_add_group)
        self.remove_group_button.clicked.connect(self._handle_remove_group)

        self.patterns_edit = QPlainTextEdit()
        self.patterns_edit.setPlaceholderText("Ein Muster pro Zeile")

        self.late_end_spin = self._hour_spin()
        self.early_start_spin = self._hour_spin()
        self.early_end_spin = self._hour_spin()
        self.late_start_spin = self._hour_spin()
        self.rest_message_input = QLineEdit()
        self.early_message_input = QLineEdit()
        self.rest_warning_check = QCheckBox("Ruhezeit-Hinweis aktiv")
        self.early_warning_check = QCheckBox("Frühstart-Hinweis aktiv")

        self.reset_button = QPushButton("Standard wiederherstellen")
        self.reset_button.clicked.connect(self._handle_reset)

        buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self._handle_save)
        buttons.rejected.connect(self.reject)

        group_buttons = QHBoxLayout()
        group_buttons.addWidget(self.add_group_button)
        group_buttons.addWidget(self.remove_group_button)
        group_buttons.addStretch(1)

        groups_box = QGroupBox("Routengruppen")
        groups_layout = QVBoxLayout(groups_box)
        groups_layout.addWidget(self.group_table)
        groups_layout.addLayout(group_buttons)

        patterns_box = QGroupBox("Ignorierte Kalender")
        patterns_layout = QVBoxLayout(patterns_box)
        patterns_layout.addWidget(self.patterns_edit)

        times_box = QGroupBox("Zeitgrenzen")
        form = QFormLayout(times_box)
        form.addRow("Spätes Ende ab (h)", self.late_end_spin)
        form.addRow("Früher Start bis (h)", self.early_start_spin)
        form.addRow("Frühes Ende bis (h)", self.early_end_spin)
        form.addRow("Später Start ab (h)", self.late_start_spin)
        form.addRow("Ruhezeit-Text", self.rest_message_input)
        form.addRow("Frühstart-Text", self.early_message_input)
        form.addRow(self.rest_warning_check)
        form.addRow(self.early_warning_check)

        footer = QHBoxLayout()
        footer.addWidget(self.reset_button)
        footer.addStretch(1)
        footer.addWidget(buttons)

        layout = QVBoxLayout(self)
        layout.addWidget(groups_box, stretch=2)
        layout.addWidget(patterns_box, stretch=1)
        layout.addWidget(times_box)
        layout.addLayout(footer)

        self._populate()

    # ------------------------------------------------------------------
    def _populate(self) -> None:
        self._fill_form(self.store.route_groups, self.store.ignored_patterns, self.store.time_settings)

    def _fill_form(self, groups: List[RouteGroup], patterns: List[str], settings: TimeSettings) -> None:
        self.group_table.setRowCount(0)
        for group in groups:
            self._append_group_row(group)
        self.patterns_edit.setPlainText("\n".join(patterns))

        self.late_end_spin.setValue(settings.late_end_hour)
        self.early_start_spin.setValue(settings.early_start_hour)
        self.early_end_spin.setValue(settings.early_end_hour)
        self.late_start_spin.setValue(settings.late_start_hour)
        self.rest_message_input.setText(settings.rest_message)
        self.early_message_input.setText(settings.early_message)
        self.rest_warning_check.setChecked(settings.enable_rest_warning)
        self.early_warning_check.setChecked(settings.enable_early_warning)

    def _append_group_row(self, group: RouteGroup) -> None:
        row = self.group_table.rowCount()
        self.group_table.insertRow(row)
        self.group_table.setItem(row, 0, QTableWidgetItem(group.name))
        self.group_table.setItem(row, 1, QTableWidgetItem(", ".join(group.codes)))
        full_item = QTableWidgetItem()
        full_item.setFlags(Qt.ItemIsEnabled | Qt.ItemIsUserCheckable)
        full_item.setCheckState(Qt.Checked if group.is_full else Qt.Unchecked)
        self.group_table.setItem(row, 2, full_item)
        self.group_table.setItem(row, 3, QTableWidgetItem(group.color))

    def _row_group(self, row: int) -> Optional[RouteGroup]:
        name_item = self.group_table.item(row, 0)
        name = name_item.text().strip() if name_item else ""
        if not name:
            return None
        codes_item = self.group_table.item(row, 1)
        codes = [code.strip() for code in (codes_item.text() if codes_item else "").split(",") if code.strip()]
        full_item = self.group_table.item(row, 2)
        color_item = self.group_table.item(row, 3)
        return RouteGroup(
            name=name,
            codes=codes,
            is_full=bool(full_item and full_item.checkState() == Qt.Checked),
            color=color_item.text().strip() if color_item else "",
        )

    # ------------------------------------------------------------------
    def _handle_add_group(self) -> None:
        self._append_group_row(RouteGroup(name="", codes=[], is_full=False, color="text-gray-300"))

    def _handle_remove_group(self) -> None:
        row = self.group_table.currentRow()
        if row >= 0:
            self.group_table.removeRow(row)

    def _handle_reset(self) -> None:
        # Nur das Formular; gespeichert wird erst mit "Speichern".
        self._fill_form(*self.store.defaults())

    def _handle_save(self) -> None:
        groups = [group for group in (self._row_group(row) for row in range(self.group_table.rowCount())) if group]
        existing = len(self.store.route_groups)
        for index, group in enumerate(groups):
            if index < existing:
                self.store.update_group(index, group)
            else:
                self.store.add_group(group)
        for index in range(len(self.store.route_groups) - 1, len(groups) - 1, -1):
            self.store.remove_group(index)

        self.store.set_ignored_patterns(self.patterns_edit.toPlainText().splitlines())
        self.store.set_time_settings(
            TimeSettings(
                late_end_hour=self.late_end_spin.value(),
                early_start_hour=self.early_start_spin.value(),
                early_end_hour=self.early_end_spin.value(),
                late_start_hour=self.late_start_spin.value(),
                rest_message=self.rest_message_input.text().strip(),
                early_message=self.early_message_input.text().strip(),
                enable_rest_warning=self.rest_warning_check.isChecked(),
                enable_early_warning=self.early_warning_check.isChecked(),
            )
        )
        self.accept()

    @staticmethod
    def _hour_spin() -> QSpinBox:
        spin = QSpinBox()
        spin.setRange(0, 23)
        return spin


__all__ = ["ScheduleSettingsDialog"]
