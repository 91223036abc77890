"""Fahrerzuordnung und Sortierung der Arbeitsstände."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .calendar_text import TWO_DAY_TURNAROUND_CODE, get_route, get_tasks, get_vh, is_nan, parse_time
from .colors import to_number
from .models import RouteGroup, Trip
from .routes import get_category
from .timing import get_actual_end, get_duration

SAME_ROUTE = 0
SAME_CATEGORY = 1
OTHER_ROUTE = 2


@dataclass(slots=True)
class DriverCandidate:
    """Fahrer aus dem linken Tag als Vorschlag für eine rechte Tour."""

    name: str
    left_index: int
    rest_gap: float
    prev_route: str
    prev_calendar: Optional[str]
    route_match: int


def parse_driver_list(text: str) -> List[str]:
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


def rank_available_drivers(
    trip: Trip,
    left_items: Sequence[Trip],
    groups: Sequence[RouteGroup],
    allowed_drivers: Sequence[str],
) -> List[DriverCandidate]:
    """Freie, erlaubte Fahrer sortiert nach Routennähe und Pause.

    Gleiche Route vor gleicher Kategorie vor allen anderen; innerhalb dessen
    die kürzeste nicht-negative Pause zuerst.
    """

    allowed = set(allowed_drivers)
    start = parse_time(trip.start_time)
    target_route = get_route(trip.calendar_name)
    target_category = get_category(target_route, groups)
    candidates: List[DriverCandidate] = []
    for index, left in enumerate(left_items):
        name = left.driver or ""
        if name not in allowed or left.is_assigned:
            continue
        end = parse_time(get_actual_end(left.end_time, left.punctuality))
        prev_route = get_route(left.calendar_name)
        if prev_route == target_route:
            route_match = SAME_ROUTE
        elif get_category(prev_route, groups) == target_category:
            route_match = SAME_CATEGORY
        else:
            route_match = OTHER_ROUTE
        candidates.append(
            DriverCandidate(
                name=name,
                left_index=index,
                rest_gap=start - end,
                prev_route=prev_route,
                prev_calendar=left.calendar_name,
                route_match=route_match,
            )
        )

    def sort_key(candidate: DriverCandidate) -> Tuple[int, float]:
        gap = candidate.rest_gap
        if is_nan(gap) or gap < 0:
            gap = math.inf
        return candidate.route_match, gap

    return sorted(candidates, key=sort_key)


def assign_driver(
    left_items: Sequence[Trip],
    right_items: Sequence[Trip],
    left_index: int,
    right_index: int,
) -> Tuple[List[Trip], List[Trip]]:
    """Setzt den Fahrer der linken Tour auf die rechte Tour.

    Der bisher zugeordnete Fahrer der rechten Tour wird links wieder frei.
    """

    name = left_items[left_index].driver
    if not name:
        raise ValueError(f"Linke Tour {left_index} hat keinen Fahrer")
    left = list(left_items)
    right = list(right_items)
    target = right[right_index]
    previous_index = target.from_left_index
    right[right_index] = target.copy(driver=name, from_left_index=left_index)
    left[left_index] = left[left_index].copy(is_assigned=True)
    if previous_index is not None and target.driver and previous_index != left_index and 0 <= previous_index < len(left):
        left[previous_index] = left[previous_index].copy(is_assigned=False)
    return left, right


def is_duplicate_assignment(right_items: Sequence[Trip], right_index: int, name: str) -> bool:
    target_id = right_items[right_index].trip_id
    return any(item.driver == name and item.trip_id != target_id for item in right_items)


def _sort_value(trip: Trip, key: str, is_left: bool) -> Any:
    getters: Dict[str, Callable[[Trip], Any]] = {
        "Start": lambda it: parse_time(it.start_time),
        "End": lambda it: parse_time(it.end_time),
        "ActualEnd": lambda it: parse_time(get_actual_end(it.end_time, it.punctuality)),
        "Driver1": lambda it: (it.driver or "").lower(),
        "Contractor": lambda it: (it.contractor or "").lower(),
        "VH": lambda it: get_vh(it.calendar_name).lower(),
        "Route": lambda it: get_route(it.calendar_name).lower(),
        "Tasks": lambda it: _number_or_nan(get_tasks(it.calendar_name)),
        "Order_Value": lambda it: _number_or_nan(it.order_value),
        "Punctuality": lambda it: _number_or_nan(it.punctuality),
        "Duration": lambda it: get_duration(it, is_left),
    }
    getter = getters.get(key)
    if getter is not None:
        return getter(trip)
    return trip.to_dict().get(key)


def _number_or_nan(value: object) -> float:
    number = to_number(value)
    return math.nan if number is None else number


def _sorted(items: Sequence[Trip], key: str, descending: bool, is_left: bool) -> List[Trip]:
    values = [(_sort_value(item, key, is_left), item) for item in items]
    numeric = all(isinstance(value, (int, float)) and not isinstance(value, bool) for value, _ in values)
    if numeric:
        valid = [pair for pair in values if not is_nan(pair[0])]
        invalid = [item for value, item in values if is_nan(value)]
        valid.sort(key=lambda pair: pair[0], reverse=descending)
        return [item for _, item in valid] + invalid
    values.sort(key=lambda pair: str("" if pair[0] is None else pair[0]).lower(), reverse=descending)
    return [item for _, item in values]


def sort_trips(
    items: Sequence[Trip],
    key: str,
    descending: bool = False,
    *,
    is_left: bool = False,
    allowed_drivers: Sequence[str] = (),
) -> List[Trip]:
    """Sortiert einen Arbeitsstand nach Spalte.

    Rechts bleiben 2DT-Touren unsortiert am Ende, links stehen erlaubte
    Fahrer sortiert vor den übrigen. Nicht lesbare Zahlen landen immer hinten.
    """

    if is_left:
        allowed = set(allowed_drivers)
        head = [item for item in items if (item.driver or "") in allowed]
        tail = [item for item in items if (item.driver or "") not in allowed]
    else:
        head = [item for item in items if get_vh(item.calendar_name) != TWO_DAY_TURNAROUND_CODE]
        tail = [item for item in items if get_vh(item.calendar_name) == TWO_DAY_TURNAROUND_CODE]
    return _sorted(head, key, descending, is_left) + tail


def index_of(items: Sequence[Trip], trip: Trip) -> int:
    """Position genau dieses Objekts; gleiche Inhalte zählen nicht."""

    for index, item in enumerate(items):
        if item is trip:
            return index
    raise ValueError(f"Tour {trip.trip_id} ist nicht in der Liste")


def allowed_first(items: Sequence[Trip], allowed_drivers: Sequence[str]) -> List[Trip]:
    allowed = set(allowed_drivers)
    return [item for item in items if (item.driver or "") in allowed] + [
        item for item in items if (item.driver or "") not in allowed
    ]


__all__ = [
    "DriverCandidate",
    "allowed_first",
    "assign_driver",
    "index_of",
    "is_duplicate_assignment",
    "parse_driver_list",
    "rank_available_drivers",
    "sort_trips",
]
