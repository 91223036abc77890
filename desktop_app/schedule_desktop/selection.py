"""Zeilenauswahl per Ziehen und Kennzahlen über die Auswahl."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .calendar_text import get_tasks, is_nan
from .colors import to_number
from .models import Trip
from .timing import format_duration, get_duration


class SelectionTracker:
    """Verfolgt die markierten Zeilenindizes einer Tabelle.

    Ein Ziehvorgang markiert immer den zusammenhängenden Bereich zwischen
    Anker und aktueller Zeile. ``toggle`` entspricht Strg-Klick, ``extend``
    Umschalt-Klick vom letzten Anker aus.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self.anchor: Optional[int] = None
        self.is_selecting = False
        self._selected: List[int] = []

    @property
    def selected(self) -> List[int]:
        return sorted(self._selected)

    def pointer_down(self, index: int, *, toggle: bool = False, extend: bool = False) -> None:
        if not self.enabled:
            return
        if toggle:
            if index in self._selected:
                self._selected = [i for i in self._selected if i != index]
            else:
                self._selected = [*self._selected, index]
        elif extend and self.anchor is not None:
            self._selected = self._range(self.anchor, index)
        else:
            self.is_selecting = True
            self.anchor = index
            self._selected = [index]

    def pointer_over(self, index: int) -> None:
        if not self.enabled or not self.is_selecting or self.anchor is None:
            return
        self._selected = self._range(self.anchor, index)

    def pointer_up(self) -> None:
        if not self.enabled:
            return
        # Anker bleibt für Umschalt-Klick erhalten.
        self.is_selecting = False

    def clear(self) -> None:
        self._selected = []
        self.anchor = None
        self.is_selecting = False

    @staticmethod
    def _range(first: int, second: int) -> List[int]:
        start, end = min(first, second), max(first, second)
        return list(range(start, end + 1))


@dataclass(slots=True)
class MetricStats:
    total: float = 0.0
    count: int = 0

    def add(self, value: Optional[float]) -> None:
        if value is None or is_nan(value):
            return
        self.total += value
        self.count += 1

    @property
    def average(self) -> float:
        return self.total / self.count if self.count else 0.0


@dataclass(slots=True)
class SelectionSummary:
    count: int
    unique_drivers: int
    tasks: MetricStats
    order_value: MetricStats
    punctuality: MetricStats
    duration: MetricStats

    @property
    def average_duration_text(self) -> str:
        return format_duration(self.duration.average)

    def describe(self) -> str:
        return (
            f"{self.count} ({self.unique_drivers}) | "
            f"Tasks {self.tasks.total:.2f} / {self.tasks.average:.2f} | "
            f"Wert {self.order_value.total:.2f} / {self.order_value.average:.2f} | "
            f"Pünktlichkeit {self.punctuality.average:.2f} | "
            f"Dauer {self.average_duration_text}"
        )


def summarize_selection(items: Sequence[Trip], selected: Iterable[int], is_left: bool) -> Optional[SelectionSummary]:
    """Kennzahlen über die markierten Zeilen; ``None`` bei höchstens einer Zeile.

    Jeder Durchschnitt teilt nur durch die Zeilen, in denen genau diese Größe
    lesbar war. Nicht lesbare Werte fehlen in Summe und Nenner.
    """

    indices = sorted({index for index in selected if 0 <= index < len(items)})
    if len(indices) <= 1:
        return None
    chosen = [items[index] for index in indices]
    summary = SelectionSummary(
        count=len(chosen),
        unique_drivers=len({trip.driver for trip in chosen if trip.driver}),
        tasks=MetricStats(),
        order_value=MetricStats(),
        punctuality=MetricStats(),
        duration=MetricStats(),
    )
    for trip in chosen:
        summary.tasks.add(to_number(get_tasks(trip.calendar_name)))
        summary.order_value.add(to_number(trip.order_value))
        summary.punctuality.add(to_number(trip.punctuality))
        summary.duration.add(get_duration(trip, is_left))
    return summary


__all__ = ["MetricStats", "SelectionSummary", "SelectionTracker", "summarize_selection"]
