"""Hauptfenster mit linkem und rechtem Arbeitsstand."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from PySide6.QtGui import QAction, QCursor
from PySide6.QtWidgets import (QFileDialog, QHBoxLayout, QLabel, QMainWindow,
                               QMenu, QMessageBox, QPlainTextEdit, QPushButton,
                               QSplitter, QVBoxLayout, QWidget)

from ..api_client import ApiError, decode_trips, unwrap_trips
from ..calendar_text import filter_ignored, get_route
from ..planning import (allowed_first, assign_driver, index_of, is_duplicate_assignment,
                        parse_driver_list, rank_available_drivers, sort_trips)
from ..routes import compute_stats
from ..schedule_store import LOAD_ERROR_MESSAGE, ScheduleDataStore
from ..settings_store import ScheduleSettingsStore
from ..timing import assignment_warning
from .schedule_table import ScheduleTable
from .settings_dialog import ScheduleSettingsDialog


class PlannerWindow(QMainWindow):
    """Planung des Folgetags anhand der Touren des Vortags."""

    def __init__(self, data_store: ScheduleDataStore, settings_store: ScheduleSettingsStore,
                 parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.data_store = data_store
        self.settings_store = settings_store
        self.setWindowTitle("Schedule Planner")
        self.resize(1400, 820)

        self.left_table = ScheduleTable(is_left=True)
        self.right_table = ScheduleTable(is_left=False)
        self.right_table.row_context_requested.connect(self._show_driver_menu)
        self.left_table.sort_requested.connect(lambda key: self._handle_sort(True, key))
        self.right_table.sort_requested.connect(lambda key: self._handle_sort(False, key))
        self._sort_state: dict[bool, tuple[str, bool]] = {}

        self.available_drivers_edit = QPlainTextEdit()
        self.available_drivers_edit.setPlaceholderText("Verfügbare Fahrer, einer pro Zeile")
        self.available_drivers_edit.setMaximumWidth(220)
        self.available_drivers_edit.textChanged.connect(self._refresh_tables)

        self.left_stats_label = QLabel("")
        self.right_stats_label = QLabel("")
        self.error_label = QLabel("")
        self.error_label.setStyleSheet("color: #db4437;")
        self.error_label.setVisible(False)

        self.reload_button = QPushButton("Neu laden")
        self.import_button = QPushButton("Export importieren")
        self.settings_button = QPushButton("Einstellungen")
        self.clear_button = QPushButton("Listen leeren")
        self.reload_button.clicked.connect(self.reload)
        self.import_button.clicked.connect(self._handle_import)
        self.settings_button.clicked.connect(self._open_settings)
        self.clear_button.clicked.connect(self._handle_clear)

        self._build_ui()

    # ------------------------------------------------------------------
    def _build_ui(self) -> None:
        toolbar = QHBoxLayout()
        toolbar.addWidget(self.reload_button)
        toolbar.addWidget(self.import_button)
        toolbar.addWidget(self.clear_button)
        toolbar.addStretch(1)
        toolbar.addWidget(self.settings_button)

        left_panel = QWidget()
        left_layout = QVBoxLayout(left_panel)
        left_layout.addWidget(self.left_stats_label)
        left_layout.addWidget(self.left_table)

        right_panel = QWidget()
        right_layout = QVBoxLayout(right_panel)
        right_layout.addWidget(self.right_stats_label)
        right_layout.addWidget(self.right_table)

        splitter = QSplitter()
        splitter.addWidget(left_panel)
        splitter.addWidget(right_panel)
        splitter.addWidget(self.available_drivers_edit)
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 1)

        central_widget = QWidget()
        layout = QVBoxLayout(central_widget)
        layout.addLayout(toolbar)
        layout.addWidget(self.error_label)
        layout.addWidget(splitter, stretch=1)
        self.setCentralWidget(central_widget)

    # ------------------------------------------------------------------
    def allowed_drivers(self) -> list[str]:
        return parse_driver_list(self.available_drivers_edit.toPlainText())

    def reload(self) -> None:
        if not self.data_store.load():
            self.error_label.setText(self.data_store.error or LOAD_ERROR_MESSAGE)
            self.error_label.setVisible(True)
            return
        self.error_label.setVisible(False)
        self._refresh_tables()

    def _refresh_tables(self) -> None:
        groups = self.settings_store.route_groups
        patterns = self.settings_store.ignored_patterns
        allowed = self.allowed_drivers()
        left = filter_ignored(self.data_store.left, patterns)
        right = filter_ignored(self.data_store.right, patterns)
        if True in self._sort_state:
            key, descending = self._sort_state[True]
            left = sort_trips(left, key, descending, is_left=True, allowed_drivers=allowed)
        else:
            left = allowed_first(left, allowed)
        if False in self._sort_state:
            key, descending = self._sort_state[False]
            right = sort_trips(right, key, descending, is_left=False)
        self.left_table.set_items(left, groups)
        self.right_table.set_items(right, groups)
        self.left_stats_label.setText(self._stats_text(compute_stats(left, groups)))
        self.right_stats_label.setText(self._stats_text(compute_stats(right, groups)))

    def _handle_sort(self, is_left: bool, key: str) -> None:
        previous = self._sort_state.get(is_left)
        descending = previous is not None and previous[0] == key and not previous[1]
        self._sort_state[is_left] = (key, descending)
        self._refresh_tables()

    def _stats_text(self, stats: dict) -> str:
        counts = stats["counts"]
        parts = [f"{group.name}: {counts.get(group.name, 0)}" for group in self.settings_store.route_groups]
        parts.append(f"Other: {counts.get('Other', 0)}")
        parts.append(f"Total: {stats['total']}")
        return "  ".join(parts)

    # ------------------------------------------------------------------
    def _show_driver_menu(self, row: int) -> None:
        trip = self.right_table.items[row]
        right_index = index_of(self.data_store.right, trip)
        candidates = rank_available_drivers(
            trip, self.data_store.left, self.settings_store.route_groups, self.allowed_drivers()
        )
        menu = QMenu(self)
        if not candidates:
            action = QAction("Keine freien Fahrer", menu)
            action.setEnabled(False)
            menu.addAction(action)
        for candidate in candidates:
            label = f"{candidate.name} ({candidate.prev_route.strip() or '-'})"
            action = QAction(label, menu)
            action.triggered.connect(
                lambda _checked=False, left_index=candidate.left_index: self._assign(left_index, right_index)
            )
            menu.addAction(action)
        menu.exec(QCursor.pos())

    def _assign(self, left_index: int, right_index: int) -> None:
        left_trip = self.data_store.left[left_index]
        right_trip = self.data_store.right[right_index]
        name = left_trip.driver or ""
        if is_duplicate_assignment(self.data_store.right, right_index, name):
            answer = QMessageBox.question(
                self, "Doppelte Zuordnung", f"{name} ist bereits einer anderen Tour zugeordnet. Trotzdem zuordnen?"
            )
            if answer != QMessageBox.Yes:
                return
        warning = assignment_warning(left_trip, right_trip, self.settings_store.time_settings)
        new_left, new_right = assign_driver(self.data_store.left, self.data_store.right, left_index, right_index)
        self.data_store.update_right(lambda _items: new_right)
        self.data_store.update_left(lambda _items: new_left)
        self._refresh_tables()
        self.statusBar().showMessage(f"{name} -> {get_route(right_trip.calendar_name).strip()}", 4000)
        if warning:
            QMessageBox.information(self, "Hinweis", warning)

    # ------------------------------------------------------------------
    def _handle_import(self) -> None:
        filename, _ = QFileDialog.getOpenFileName(self, "Export importieren", "", "JSON (*.json)")
        if not filename:
            return
        try:
            payload = json.loads(Path(filename).read_text(encoding="utf-8"))
            trips = decode_trips(unwrap_trips(payload))
            loaded = self.data_store.import_trips(trips, self.settings_store.ignored_patterns)
        except (OSError, ValueError, ApiError) as exc:
            QMessageBox.warning(self, "Import fehlgeschlagen", str(exc))
            return
        if not loaded:
            self.error_label.setText(self.data_store.error or LOAD_ERROR_MESSAGE)
            self.error_label.setVisible(True)
            return
        self.error_label.setVisible(False)
        self._refresh_tables()

    def _handle_clear(self) -> None:
        answer = QMessageBox.question(self, "Listen leeren", "Beide Tourenlisten auf dem Server löschen?")
        if answer != QMessageBox.Yes:
            return
        try:
            self.data_store.clear()
        except ApiError as exc:
            QMessageBox.warning(self, "Leeren fehlgeschlagen", str(exc))
            return
        self._refresh_tables()

    def _open_settings(self) -> None:
        dialog = ScheduleSettingsDialog(self.settings_store, self)
        if dialog.exec():
            self._refresh_tables()

    def closeEvent(self, event) -> None:  # noqa: N802 - Qt API
        self.data_store.close()
        super().closeEvent(event)


__all__ = ["PlannerWindow"]
