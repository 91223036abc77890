"""Lokale Ablage der Planungseinstellungen (Routengruppen, Filter, Zeiten)."""

from __future__ import annotations

import json
import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .models import RouteGroup, TimeSettings

logger = logging.getLogger(__name__)

SETTINGS_KEY = "scheduleSettings"

DEFAULT_IGNORED_PATTERNS: List[str] = [
    "every 2nd day north",
    "everyday",
    "every 2nd south-west",
    "every 2nd day south",
    "South Wales 2nd",
]

DEFAULT_ROUTE_GROUPS: List[RouteGroup] = [
    RouteGroup("2DT", ["EDINBURGH", "GLASGOW", "INVERNESS", "ABERDEEN", "EX+TR", "TQ+PL"], True, "text-gray-400"),
    RouteGroup(
        "London",
        ["WD", "HA", "UB", "TW", "KT", "CR", "BR", "DA", "RM", "IG", "EN", "SM", "W", "NW", "N", "E", "EC", "SE", "WC"],
        False,
        "text-purple-500",
    ),
    RouteGroup("Wales", ["LL", "SY", "SA"], False, "text-yellow-500"),
    RouteGroup("North", ["LA", "CA", "NE", "DL", "DH", "SR", "TS", "HG", "YO", "HU", "BD"], False, "text-red-500"),
    RouteGroup("East Midlands", ["NR", "IP", "CO"], False, "text-blue-500"),
    RouteGroup("South East", ["ME", "CT", "TN", "RH", "BN", "GU", "PO", "SO"], False, "text-green-500"),
    RouteGroup("South West", ["SP", "BH", "DT", "TA", "EX", "TQ", "PL", "TR"], False, "text-pink-500"),
    RouteGroup("West Midlands", ["ST", "TF", "WV", "DY", "HR", "WR", "B", "WS", "CV", "NN"], False, "text-teal-300"),
]


def default_route_groups() -> List[RouteGroup]:
    return deepcopy(DEFAULT_ROUTE_GROUPS)


def normalize_codes(codes: List[str]) -> List[str]:
    """Kürzel in Großschreibung, Trenner vereinheitlicht, ohne Duplikate."""

    seen: set[str] = set()
    normalized: List[str] = []
    for code in codes:
        candidate = "+".join(part for part in str(code).upper().replace("+", " ").split() if part)
        if not candidate or candidate in seen:
            continue
        normalized.append(candidate)
        seen.add(candidate)
    return normalized


class JsonFileStore:
    """Einfacher Schlüssel-Wert-Speicher in einer JSON-Datei."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} enthält kein JSON-Objekt")
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except (OSError, ValueError):
            data = {}
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)


class ScheduleSettingsStore:
    """Hält die aktuellen Einstellungen im Speicher und spiegelt sie lokal.

    Die Datei wird einmalig mit :meth:`load` gelesen und über die Defaults
    gelegt. Jede Änderung schreibt das komplette Paket zurück. Lese- und
    Schreibfehler werden protokolliert, der Speicherzustand bleibt maßgeblich.
    """

    def __init__(self, store: JsonFileStore, key: str = SETTINGS_KEY) -> None:
        self.store = store
        self.key = key
        self.route_groups: List[RouteGroup] = default_route_groups()
        self.ignored_patterns: List[str] = list(DEFAULT_IGNORED_PATTERNS)
        self.time_settings: TimeSettings = TimeSettings()
        self._loaded = False

    # ------------------------------------------------------------------
    # Persistenz
    # ------------------------------------------------------------------
    def load(self) -> None:
        if self._loaded:
            return
        self._loaded = True
        try:
            raw = self.store.get(self.key)
            if not raw:
                return
            parsed = json.loads(raw)
            if not isinstance(parsed, dict):
                raise ValueError("settings blob is not an object")
        except (OSError, ValueError) as exc:
            logger.warning("Einstellungen konnten nicht gelesen werden: %s", exc)
            return
        self._apply(parsed)

    def _apply(self, parsed: Dict[str, Any]) -> None:
        if isinstance(parsed.get("routeGroups"), list):
            try:
                groups = [RouteGroup.from_dict(item) for item in parsed["routeGroups"]]
            except (KeyError, TypeError, AttributeError) as exc:
                logger.warning("Gespeicherte Routengruppen ignoriert: %s", exc)
            else:
                for group in groups:
                    group.codes = normalize_codes(group.codes)
                self.route_groups = groups
        if isinstance(parsed.get("ignoredPatterns"), list):
            self.ignored_patterns = [str(pattern) for pattern in parsed["ignoredPatterns"]]
        if isinstance(parsed.get("timeSettings"), dict):
            try:
                self.time_settings = TimeSettings.from_dict(dict(parsed["timeSettings"]))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Gespeicherte Zeiteinstellungen ignoriert: %s", exc)

    def bundle(self) -> Dict[str, Any]:
        return {
            "routeGroups": [group.to_dict() for group in self.route_groups],
            "ignoredPatterns": list(self.ignored_patterns),
            "timeSettings": self.time_settings.to_dict(),
        }

    def save(self) -> bool:
        try:
            self.store.set(self.key, json.dumps(self.bundle()))
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Einstellungen konnten nicht gespeichert werden: %s", exc)
            return False
        return True

    # ------------------------------------------------------------------
    # Änderungen
    # ------------------------------------------------------------------
    def update_group(self, index: int, group: RouteGroup) -> None:
        group.codes = normalize_codes(group.codes)
        self.route_groups = [group if i == index else existing for i, existing in enumerate(self.route_groups)]
        self.save()

    def add_group(self, group: RouteGroup) -> None:
        group.codes = normalize_codes(group.codes)
        self.route_groups = [*self.route_groups, group]
        self.save()

    def remove_group(self, index: int) -> None:
        self.route_groups = [group for i, group in enumerate(self.route_groups) if i != index]
        self.save()

    def set_ignored_patterns(self, patterns: List[str]) -> None:
        self.ignored_patterns = [pattern for pattern in (p.strip() for p in patterns) if pattern]
        self.save()

    def set_time_settings(self, time_settings: TimeSettings) -> None:
        self.time_settings = time_settings
        self.save()

    def defaults(self) -> Tuple[List[RouteGroup], List[str], TimeSettings]:
        """Standardwerte, ohne den aktuellen Stand zu verändern."""

        return default_route_groups(), list(DEFAULT_IGNORED_PATTERNS), TimeSettings()

    def reset(self) -> None:
        self.route_groups, self.ignored_patterns, self.time_settings = self.defaults()
        self.save()


__all__ = [
    "DEFAULT_IGNORED_PATTERNS",
    "DEFAULT_ROUTE_GROUPS",
    "JsonFileStore",
    "ScheduleSettingsStore",
    "SETTINGS_KEY",
    "default_route_groups",
    "normalize_codes",
]
