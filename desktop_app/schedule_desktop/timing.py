"""Tatsächliches Tourende, Dauer und Ruhezeit-Hinweise."""

from __future__ import annotations

import datetime as dt
import math
from typing import Optional, Union

from .calendar_text import is_nan, parse_time
from .models import TimeSettings, Trip

EMPTY_DURATION = "--:--"


def parse_punctuality(value: Optional[Union[str, int, float]]) -> int:
    """Verspätung in Minuten; fehlende oder ungültige Werte zählen als 0."""

    if value is None or isinstance(value, bool):
        return 0
    try:
        number = float(str(value).strip())
    except ValueError:
        return 0
    if not math.isfinite(number):
        return 0
    return int(number)


def _parse_end(end_time: str) -> Optional[dt.datetime]:
    try:
        parsed = dt.datetime.fromisoformat(end_time.strip())
    except ValueError:
        parsed = None
    if parsed is not None:
        # Zeitzonenbehaftete Werte in Ortszeit anzeigen.
        return parsed.astimezone().replace(tzinfo=None) if parsed.tzinfo else parsed
    minutes = parse_time(end_time)
    if is_nan(minutes):
        return None
    midnight = dt.datetime.combine(dt.date.today(), dt.time())
    return midnight + dt.timedelta(minutes=minutes)


def get_actual_end(end_time: Optional[str], punctuality: Optional[Union[str, int, float]]) -> str:
    """Geplantes Ende plus Verspätung als ``HH:MM``.

    Akzeptiert ISO-Zeitstempel (``2024-01-01T10:00``) sowie ``"<Label> HH:MM"``.
    Ohne lesbares Ende ist das Ergebnis leer.
    """

    if not end_time:
        return ""
    scheduled = _parse_end(end_time)
    if scheduled is None:
        return ""
    actual = scheduled + dt.timedelta(minutes=parse_punctuality(punctuality))
    return actual.strftime("%H:%M")


def get_duration(trip: Trip, is_left: bool) -> float:
    """Minuten zwischen Start und Ende.

    Im linken Arbeitsstand zählt das tatsächliche Ende, im rechten das
    geplante. ``math.nan``, wenn eine der Zeiten nicht lesbar ist.
    """

    start = parse_time(trip.start_time)
    if is_left:
        end = parse_time(get_actual_end(trip.end_time, trip.punctuality))
    else:
        end = parse_time(trip.end_time)
    if is_nan(start) or is_nan(end):
        return math.nan
    return end - start


def format_duration(minutes: float) -> str:
    """Formatiert eine Minutenzahl als ``HH:MM``; Stunden dürfen 24 übersteigen.

    Negative Werte behalten ein führendes ``-``.
    """

    if minutes is None or is_nan(minutes):
        return EMPTY_DURATION
    total = int(round(minutes))
    sign = "-" if total < 0 else ""
    hours, mins = divmod(abs(total), 60)
    return f"{sign}{hours:02d}:{mins:02d}"


def assignment_warning(left_trip: Optional[Trip], right_trip: Trip, settings: TimeSettings) -> str:
    """Hinweistext beim Übertragen eines Fahrers vom linken auf den rechten Tag."""

    if left_trip is None:
        return ""
    actual_end = parse_time(get_actual_end(left_trip.end_time, left_trip.punctuality))
    target_start = parse_time(right_trip.start_time)
    if is_nan(actual_end) or is_nan(target_start):
        return ""
    if (
        settings.enable_rest_warning
        and actual_end > settings.late_end_hour * 60
        and target_start < settings.early_start_hour * 60
    ):
        return settings.rest_message
    if (
        settings.enable_early_warning
        and actual_end <= settings.early_end_hour * 60
        and target_start > settings.late_start_hour * 60
    ):
        return settings.early_message
    return ""


__all__ = [
    "EMPTY_DURATION",
    "assignment_warning",
    "format_duration",
    "get_actual_end",
    "get_duration",
    "parse_punctuality",
]
