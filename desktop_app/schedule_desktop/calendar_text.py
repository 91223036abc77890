"""Zerlegung der Freitextfelder einer Tour (Uhrzeiten und Kalendername)."""

from __future__ import annotations

import math
import re
from typing import Iterable, List, Optional, Sequence, TypeVar

TWO_DAY_TURNAROUND_KEYWORDS = ("EDINBURGH", "GLASGOW", "ABERDEEN", "EX+TR", "INVERNESS", "TQ+PL")
TWO_DAY_TURNAROUND_CODE = "2DT"

_SEPARATOR_RUN = re.compile(r"[\s+]+")
_CLOCK_PART = re.compile(r"^\s*\d+\s*$")

T = TypeVar("T")


def is_nan(value: object) -> bool:
    return isinstance(value, float) and math.isnan(value)


def get_text_after_space(text: Optional[str]) -> str:
    """Entfernt ein Präfix wie ``"Shift "`` vor der eigentlichen Uhrzeit."""

    if not text:
        return ""
    _, space, rest = text.partition(" ")
    return rest if space else text


def parse_time(text: Optional[str]) -> float:
    """Wandelt ``"<Label> HH:MM"`` in Minuten seit Mitternacht um.

    Ungültige Eingaben liefern ``math.nan`` statt einer Ausnahme. Ein gültiges
    Ergebnis ist immer ganzzahlig.
    """

    value = get_text_after_space(text)
    parts = value.split(":")
    if len(parts) < 2:
        return math.nan
    hours, minutes = parts[0], parts[1]
    if not _CLOCK_PART.match(hours) or not _CLOCK_PART.match(minutes):
        return math.nan
    return int(hours) * 60 + int(minutes)


def normalize_route(route: Optional[str]) -> str:
    """Großschreibung, Leerzeichen und ``+`` werden zu einem ``+`` zusammengefasst."""

    if not route:
        return ""
    collapsed = _SEPARATOR_RUN.sub("+", route.upper())
    return collapsed.strip("+")


def get_route(text: Optional[str]) -> str:
    """Route zwischen dem ersten ``:`` und der folgenden ``(``.

    Leerraum direkt nach dem Doppelpunkt fällt weg, Leerraum vor der Klammer
    bleibt erhalten: ``"X: LONDON (5)"`` ergibt ``"LONDON "``.
    """

    if not text:
        return ""
    colon = text.find(":")
    if colon == -1:
        return ""
    bracket = text.find("(", colon + 1)
    end = bracket if bracket != -1 else len(text)
    return text[colon + 1 : end].lstrip()


def get_tasks(text: Optional[str]) -> str:
    if not text:
        return ""
    start = text.find("(")
    if start == -1:
        return ""
    end = text.find(")", start + 1)
    return text[start + 1 : end] if end != -1 else text[start + 1 :]


def get_vh(text: Optional[str]) -> str:
    """Regionalkennung zwischen dem ersten und zweiten ``-``.

    Routen mit einem der Zwei-Tages-Ziele (Schottland, Cornwall, Devon)
    werden unabhängig von Bindestrichen als ``"2DT"`` markiert.
    """

    if not text:
        return ""
    route = normalize_route(get_route(text))
    if route and any(keyword in route for keyword in TWO_DAY_TURNAROUND_KEYWORDS):
        return TWO_DAY_TURNAROUND_CODE
    first = text.find("-")
    if first == -1:
        return ""
    second = text.find("-", first + 1)
    return text[first + 1 : second] if second != -1 else text[first + 1 :]


def matches_ignored(calendar_name: Optional[str], patterns: Iterable[str]) -> bool:
    lowered = (calendar_name or "").lower()
    return any(pattern and pattern.lower() in lowered for pattern in patterns)


def filter_ignored(items: Sequence[T], patterns: Sequence[str]) -> List[T]:
    """Entfernt Touren, deren Kalendername eines der Muster enthält."""

    return [item for item in items if not matches_ignored(getattr(item, "calendar_name", None), patterns)]


__all__ = [
    "TWO_DAY_TURNAROUND_CODE",
    "TWO_DAY_TURNAROUND_KEYWORDS",
    "filter_ignored",
    "get_route",
    "get_tasks",
    "get_text_after_space",
    "get_vh",
    "is_nan",
    "matches_ignored",
    "normalize_route",
    "parse_time",
]
