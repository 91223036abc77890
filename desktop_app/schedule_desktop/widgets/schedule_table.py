"""Tabellarische Darstellung eines Arbeitsstands mit Zieh-Auswahl."""

from __future__ import annotations

import re
from typing import Optional, Sequence

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QBrush, QColor, QFont
from PySide6.QtWidgets import (QAbstractItemView, QLabel, QTableWidget,
                               QTableWidgetItem, QVBoxLayout, QWidget)

from ..calendar_text import TWO_DAY_TURNAROUND_CODE, get_route, get_tasks, get_text_after_space, get_vh, parse_time
from ..colors import (amount_color, amount_range, price_color, punctuality_style,
                      range_color, start_time_class, time_range)
from ..models import RouteGroup, Trip
from ..routes import get_route_color, has_special_code
from ..selection import SelectionTracker, summarize_selection
from ..timing import format_duration, get_actual_end, get_duration

_HSL = re.compile(r"hsl\((\d+(?:\.\d+)?),\s*(\d+(?:\.\d+)?)%,\s*(\d+(?:\.\d+)?)%\)")

TAILWIND_COLORS = {
    "gray-200": "#e5e7eb",
    "gray-300": "#d1d5db",
    "gray-400": "#9ca3af",
    "gray-900": "#111827",
    "green-300": "#86efac",
    "green-500": "#22c55e",
    "green-600": "#16a34a",
    "green-700": "#15803d",
    "red-500": "#ef4444",
    "red-600": "#dc2626",
    "amber-500": "#f59e0b",
    "yellow-500": "#eab308",
    "purple-500": "#a855f7",
    "blue-500": "#3b82f6",
    "pink-500": "#ec4899",
    "teal-300": "#5eead4",
    "white": "#ffffff",
    "black": "#000000",
}

SELECTED_BACKGROUND = QColor("#111827")
TWO_DAY_FOREGROUND = QColor("#6b7280")


def css_color(value: str) -> Optional[QColor]:
    """Übersetzt ``hsl(...)``, ``#hex`` oder ein Tailwind-Token in eine QColor."""

    if not value:
        return None
    match = _HSL.fullmatch(value.strip())
    if match:
        hue, saturation, lightness = (float(part) for part in match.groups())
        return QColor.fromHsl(int(hue) % 360, round(saturation * 2.55), round(lightness * 2.55))
    if value.startswith("#"):
        return QColor(value)
    for token in value.split():
        for prefix in ("text-", "bg-"):
            if token.startswith(prefix) and token[len(prefix):] in TAILWIND_COLORS:
                return QColor(TAILWIND_COLORS[token[len(prefix):]])
    return None


def _class_color(classes: str, prefix: str) -> Optional[QColor]:
    tokens = [token for token in classes.split() if token.startswith(prefix)]
    return css_color(" ".join(tokens)) if tokens else None


class _DragSelectTable(QTableWidget):
    """QTableWidget, der Mausereignisse an einen SelectionTracker weitergibt."""

    selection_changed = Signal()
    context_requested = Signal(int)

    def __init__(self, tracker: SelectionTracker, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.tracker = tracker
        self.setSelectionMode(QAbstractItemView.NoSelection)
        self.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.setMouseTracking(True)
        self.setContextMenuPolicy(Qt.CustomContextMenu)
        self.customContextMenuRequested.connect(self._handle_context_menu)

    def _row_at(self, event) -> int:
        return self.rowAt(event.position().toPoint().y())

    def mousePressEvent(self, event) -> None:  # noqa: N802 - Qt API
        row = self._row_at(event)
        if event.button() == Qt.LeftButton and row >= 0:
            modifiers = event.modifiers()
            self.tracker.pointer_down(
                row,
                toggle=bool(modifiers & (Qt.ControlModifier | Qt.MetaModifier)),
                extend=bool(modifiers & Qt.ShiftModifier),
            )
            self.selection_changed.emit()
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event) -> None:  # noqa: N802 - Qt API
        row = self._row_at(event)
        if row >= 0 and self.tracker.is_selecting:
            self.tracker.pointer_over(row)
            self.selection_changed.emit()
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event) -> None:  # noqa: N802 - Qt API
        self.tracker.pointer_up()
        super().mouseReleaseEvent(event)

    def _handle_context_menu(self, pos) -> None:
        row = self.rowAt(pos.y())
        if row >= 0:
            self.context_requested.emit(row)


class ScheduleTable(QWidget):
    """Tourenliste mit farblicher Kodierung und Auswahlstatistik."""

    row_context_requested = Signal(int)
    sort_requested = Signal(str)

    LEFT_HEADERS = ["Start", "Ende", "Ist-Ende", "Dauer", "Fahrer", "Subunternehmer", "VH",
                    "Route", "Tasks", "Wert", "Pünktlichkeit"]
    RIGHT_HEADERS = ["Start", "Ende", "Dauer", "Fahrer", "Subunternehmer", "VH", "Route",
                     "Tasks", "Wert"]
    LEFT_SORT_KEYS = ["Start", "End", "ActualEnd", "Duration", "Driver1", "Contractor", "VH",
                      "Route", "Tasks", "Order_Value", "Punctuality"]
    RIGHT_SORT_KEYS = ["Start", "End", "Duration", "Driver1", "Contractor", "VH", "Route",
                       "Tasks", "Order_Value"]

    def __init__(self, *, is_left: bool, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.is_left = is_left
        self.items: list[Trip] = []
        self.route_groups: list[RouteGroup] = []
        self.tracker = SelectionTracker()

        headers = self.LEFT_HEADERS if is_left else self.RIGHT_HEADERS
        self.table = _DragSelectTable(self.tracker, self)
        self.table.setColumnCount(len(headers))
        self.table.setHorizontalHeaderLabels(headers)
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.verticalHeader().setVisible(False)
        self.table.selection_changed.connect(self._refresh_selection)
        self.table.context_requested.connect(self.row_context_requested.emit)
        self.table.horizontalHeader().sectionClicked.connect(self._handle_header_click)

        self.summary_label = QLabel("")
        self.summary_label.setVisible(False)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.table)
        layout.addWidget(self.summary_label)

    # ------------------------------------------------------------------
    def set_items(self, items: Sequence[Trip], route_groups: Sequence[RouteGroup]) -> None:
        self.items = list(items)
        self.route_groups = list(route_groups)
        self.tracker.clear()

        amounts = amount_range(item.order_value for item in self.items)
        if self.is_left:
            ends = time_range([parse_time(get_actual_end(it.end_time, it.punctuality)) for it in self.items])
        else:
            ends = time_range([parse_time(it.end_time) for it in self.items])

        self.table.setRowCount(len(self.items))
        for row, trip in enumerate(self.items):
            self._populate_row(row, trip, amounts, ends)
        self.table.resizeColumnsToContents()
        self._refresh_selection()

    # ------------------------------------------------------------------
    def _populate_row(self, row: int, trip: Trip, amounts, ends) -> None:
        is_two_day = get_vh(trip.calendar_name) == TWO_DAY_TURNAROUND_CODE
        start_text = get_text_after_space(trip.start_time)
        if self.is_left:
            end_text = get_actual_end(trip.end_time, trip.punctuality)
            end_minutes = parse_time(end_text)
        else:
            end_text = get_text_after_space(trip.end_time)
            end_minutes = parse_time(trip.end_time)
        route = get_route(trip.calendar_name)
        route_text = f"⚠ {route}" if has_special_code(trip.calendar_name) else route

        start_item = self._item(start_text)
        start_classes = start_time_class(trip.start_time)
        start_item.setBackground(QBrush(_class_color(start_classes, "bg-") or QColor("#e5e7eb")))
        start_item.setForeground(QBrush(_class_color(start_classes, "text-") or QColor("#000000")))

        end_item = self._item(end_text)
        end_color = css_color(range_color(end_minutes, ends))
        if end_color is not None and not is_two_day:
            end_item.setBackground(QBrush(end_color))

        value_item = self._item(trip.order_value or "")
        value_color = css_color(amount_color(trip.order_value, amounts) if self.is_left else price_color(trip.order_value))
        if value_color is not None:
            value_item.setForeground(QBrush(value_color))

        route_item = self._item(route_text)
        route_color = css_color(get_route_color(route, self.route_groups))
        if route_color is not None:
            route_item.setForeground(QBrush(route_color))

        cells = [start_item]
        if self.is_left:
            cells += [self._item(get_text_after_space(trip.end_time)), end_item]
        else:
            cells.append(end_item)
        cells += [
            self._item(format_duration(get_duration(trip, self.is_left))),
            self._item(trip.driver or ""),
            self._item(trip.contractor or ""),
            self._item(get_vh(trip.calendar_name)),
            route_item,
            self._item(get_tasks(trip.calendar_name)),
            value_item,
        ]
        if self.is_left:
            style = punctuality_style(trip.punctuality)
            punctuality_item = self._item(style.text)
            color = css_color(style.color)
            if color is not None:
                punctuality_item.setForeground(QBrush(color))
            if style.bold:
                font = QFont()
                font.setBold(True)
                punctuality_item.setFont(font)
            cells.append(punctuality_item)

        for column, item in enumerate(cells):
            if is_two_day and item is not start_item:
                item.setForeground(QBrush(TWO_DAY_FOREGROUND))
            item.setData(Qt.UserRole, item.background())
            self.table.setItem(row, column, item)

    # ------------------------------------------------------------------
    def _refresh_selection(self) -> None:
        selected = set(self.tracker.selected)
        for row in range(self.table.rowCount()):
            for column in range(self.table.columnCount()):
                item = self.table.item(row, column)
                if item is None:
                    continue
                if row in selected:
                    item.setBackground(QBrush(SELECTED_BACKGROUND))
                else:
                    item.setBackground(item.data(Qt.UserRole) or QBrush())

        summary = summarize_selection(self.items, selected, self.is_left)
        self.summary_label.setVisible(summary is not None)
        self.summary_label.setText(summary.describe() if summary else "")

    def _handle_header_click(self, column: int) -> None:
        keys = self.LEFT_SORT_KEYS if self.is_left else self.RIGHT_SORT_KEYS
        if 0 <= column < len(keys):
            self.sort_requested.emit(keys[column])

    @staticmethod
    def _item(text: str) -> QTableWidgetItem:
        item = QTableWidgetItem(text)
        item.setFlags(Qt.ItemIsSelectable | Qt.ItemIsEnabled)
        return item


__all__ = ["ScheduleTable", "css_color"]
