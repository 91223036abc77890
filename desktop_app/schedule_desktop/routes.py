"""Einordnung von Routen in konfigurierbare Gruppen."""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence

from .calendar_text import get_route, normalize_route
from .models import RouteGroup, Trip

OTHER_CATEGORY = "Other"
DEFAULT_ROUTE_COLOR = "text-gray-300"

SPECIAL_CODES = frozenset({"LA", "EX", "CA", "TQ", "NE", "ME", "CT", "SA", "NR"})
# Exeter + Truro is a two-day turnaround, not a special region.
SPECIAL_CODE_EXCEPTIONS = (("EX", "TR"),)


def _route_tokens(normalized: str) -> List[str]:
    return [token.strip() for token in normalized.split("+") if token.strip()]


def _group_matches(group: RouteGroup, normalized: str) -> bool:
    codes = {normalize_route(code) for code in group.codes}
    codes.discard("")
    if group.is_full:
        return normalized in codes
    return any(token in codes for token in _route_tokens(normalized))


def match_route_group(route: Optional[str], groups: Sequence[RouteGroup]) -> Optional[RouteGroup]:
    """Liefert die erste passende Gruppe in Listenreihenfolge."""

    normalized = normalize_route(route)
    if not normalized:
        return None
    for group in groups:
        if _group_matches(group, normalized):
            return group
    return None


def get_category(route: Optional[str], groups: Sequence[RouteGroup]) -> str:
    group = match_route_group(route, groups)
    return group.name if group else OTHER_CATEGORY


def get_route_color(route: Optional[str], groups: Sequence[RouteGroup], default: str = DEFAULT_ROUTE_COLOR) -> str:
    group = match_route_group(route, groups)
    return group.color if group else default


def has_special_code(calendar_name: Optional[str]) -> bool:
    """Prüft, ob die Route eines der Sonderkürzel enthält.

    Die Kombination ``EX+TR`` zählt nie als Sonderkürzel, auch wenn ``EX``
    für sich genommen eines ist.
    """

    tokens = _route_tokens(normalize_route(get_route(calendar_name)))
    remaining: List[str] = []
    index = 0
    while index < len(tokens):
        pair = tuple(tokens[index : index + 2])
        if pair in SPECIAL_CODE_EXCEPTIONS:
            index += 2
            continue
        remaining.append(tokens[index])
        index += 1
    return any(token in SPECIAL_CODES for token in remaining)


def compute_stats(trips: Iterable[Trip], groups: Sequence[RouteGroup]) -> Dict[str, object]:
    """Zählt Touren je Kategorie sowie zugewiesene Touren."""

    counts: Counter[str] = Counter()
    total = 0
    assigned = 0
    for trip in trips:
        total += 1
        if trip.is_assigned:
            assigned += 1
        counts[get_category(get_route(trip.calendar_name), groups)] += 1
    return {"total": total, "assigned": assigned, "counts": dict(counts)}


__all__ = [
    "DEFAULT_ROUTE_COLOR",
    "OTHER_CATEGORY",
    "SPECIAL_CODES",
    "compute_stats",
    "get_category",
    "get_route_color",
    "has_special_code",
    "match_route_group",
]
