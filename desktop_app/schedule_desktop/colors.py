"""Farbskalen für Preis, Pünktlichkeit und Uhrzeiten."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple, Union

from .calendar_text import get_text_after_space, is_nan

Number = Union[int, float]

# (Betrag, Farbton) an den Knickpunkten der Preisskala.
PRICE_BREAKPOINTS: Tuple[Tuple[float, float], ...] = ((500, 0), (650, 60), (800, 120), (950, 210))
PRICE_TOO_HIGH_HUE = 210

# (Verhältnis, Farbton, Helligkeit): grün -> gelb -> orange.
RANGE_STOPS: Tuple[Tuple[float, float, float], ...] = (
    (0.0, 120, 35),
    (0.25, 90, 40),
    (0.5, 60, 45),
    (0.75, 40, 45),
    (1.0, 25, 45),
)

NEUTRAL_DARK = "#374151"

PUNCTUALITY_SEVERE_MINUTES = 90
PUNCTUALITY_MODERATE_MINUTES = 45

START_TIME_CLASSES = {
    "06:00": "bg-red-600 text-white",
    "06:30": "bg-red-500 text-black",
    "07:30": "bg-yellow-500 text-black",
    "08:00": "bg-green-300 text-black",
    "08:30": "bg-green-700 text-white",
    "09:00": "bg-gray-900 text-white",
}
DEFAULT_START_CLASS = "bg-gray-200 text-black"


@dataclass(frozen=True, slots=True)
class ValueRange:
    min: float = 0.0
    max: float = 0.0


@dataclass(frozen=True, slots=True)
class AmountRange:
    """Spannweite ohne Ausreißer plus die Ausreißergrenzen (IQR)."""

    min: float = 0.0
    max: float = 0.0
    lower: float = 0.0
    upper: float = 0.0


@dataclass(frozen=True, slots=True)
class PunctualityStyle:
    level: str
    color: str
    bold: bool
    text: str


def to_number(value: object) -> Optional[float]:
    """Liest einen endlichen Zahlenwert; sonst ``None``."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def _hsl(hue: float, saturation: float, lightness: float) -> str:
    return f"hsl({hue:.0f}, {saturation:.0f}%, {lightness:.0f}%)"


def price_hue(value: float) -> float:
    first_amount, first_hue = PRICE_BREAKPOINTS[0]
    if value <= first_amount:
        return first_hue
    for (low, low_hue), (high, high_hue) in zip(PRICE_BREAKPOINTS, PRICE_BREAKPOINTS[1:]):
        if value <= high:
            return low_hue + (value - low) / (high - low) * (high_hue - low_hue)
    return PRICE_TOO_HIGH_HUE


def price_color(value: object) -> str:
    """Preis als Farbe; über 950 bewusst blau als Hinweis auf einen Prüffall."""

    number = to_number(value)
    if number is None:
        return ""
    return _hsl(price_hue(number), 80, 45)


def punctuality_style(value: object) -> PunctualityStyle:
    number = to_number(value)
    if number is None:
        return PunctualityStyle(level="none", color="text-gray-400", bold=False, text="-")
    text = f"{number:g}"
    if number > PUNCTUALITY_SEVERE_MINUTES:
        return PunctualityStyle(level="severe", color="text-red-600", bold=True, text=text)
    if number > PUNCTUALITY_MODERATE_MINUTES:
        return PunctualityStyle(level="moderate", color="text-amber-500", bold=False, text=text)
    return PunctualityStyle(level="fine", color="text-green-600", bold=False, text=text)


def _ratio(value: float, value_range: Union[ValueRange, AmountRange]) -> float:
    span = value_range.max - value_range.min
    if span == 0:
        return 0.0
    return min(1.0, max(0.0, (value - value_range.min) / span))


def range_color(value: Optional[Number], value_range: Union[ValueRange, AmountRange]) -> str:
    """Interpoliert Farbton und Helligkeit über vier lineare Abschnitte."""

    if value is None or is_nan(value):
        return ""
    ratio = _ratio(float(value), value_range)
    for (low, low_hue, low_light), (high, high_hue, high_light) in zip(RANGE_STOPS, RANGE_STOPS[1:]):
        if ratio <= high:
            step = (ratio - low) / (high - low)
            hue = low_hue + step * (high_hue - low_hue)
            lightness = low_light + step * (high_light - low_light)
            return _hsl(hue, 85, lightness)
    _, hue, lightness = RANGE_STOPS[-1]
    return _hsl(hue, 85, lightness)


def amount_color(value: object, amount_range: AmountRange) -> str:
    """Wie :func:`range_color`, Ausreißer erhalten jedoch eine neutrale Farbe."""

    number = to_number(value)
    if number is None:
        return ""
    if number < amount_range.lower or number > amount_range.upper:
        return NEUTRAL_DARK
    return range_color(number, amount_range)


def amount_range(values: Iterable[object]) -> AmountRange:
    numbers = [number for number in (to_number(value) for value in values) if number is not None]
    if not numbers:
        return AmountRange()
    ordered = sorted(numbers)
    q1 = ordered[int(len(ordered) * 0.25)]
    q3 = ordered[int(len(ordered) * 0.75)]
    iqr = q3 - q1
    lower = q1 - 1.5 * iqr
    upper = q3 + 1.5 * iqr
    inliers = [number for number in numbers if lower <= number <= upper] or numbers
    return AmountRange(min=min(inliers), max=max(inliers), lower=lower, upper=upper)


def time_range(values: Sequence[Number]) -> ValueRange:
    minutes = [value for value in values if value is not None and not is_nan(value)]
    if not minutes:
        return ValueRange()
    return ValueRange(min=min(minutes), max=max(minutes))


def start_time_class(start_time: Optional[str]) -> str:
    return START_TIME_CLASSES.get(get_text_after_space(start_time), DEFAULT_START_CLASS)


__all__ = [
    "AmountRange",
    "NEUTRAL_DARK",
    "PunctualityStyle",
    "ValueRange",
    "amount_color",
    "amount_range",
    "price_color",
    "price_hue",
    "punctuality_style",
    "range_color",
    "start_time_class",
    "time_range",
    "to_number",
]
