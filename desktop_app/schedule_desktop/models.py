"""Datamodelle für den Schichtplaner."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Union

TRIP_FIELDS = {
    "ID": "trip_id",
    "Start_Time": "start_time",
    "End_Time": "end_time",
    "Driver1": "driver",
    "Contractor": "contractor",
    "Punctuality": "punctuality",
    "Calendar_Name": "calendar_name",
    "Order_Value": "order_value",
    "isAssigned": "is_assigned",
    "fromLeftIndex": "from_left_index",
}


@dataclass(slots=True)
class Trip:
    """Eine geplante Tour aus dem linken oder rechten Arbeitsstand."""

    trip_id: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    driver: Optional[str] = None
    contractor: Optional[str] = None
    punctuality: Optional[Union[str, int, float]] = None
    calendar_name: Optional[str] = None
    order_value: Optional[str] = None
    is_assigned: Optional[bool] = None
    from_left_index: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Trip":
        values: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for key, value in data.items():
            attr = TRIP_FIELDS.get(key)
            if attr is None:
                extra[key] = value
            else:
                values[attr] = value
        identifier = values.pop("trip_id", None)
        if identifier is None:
            identifier = extra.pop("id", "")
        return cls(trip_id=str(identifier), extra=extra, **values)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.extra)
        for key, attr in TRIP_FIELDS.items():
            value = getattr(self, attr)
            if value is not None or key == "ID":
                data[key] = value
        return data

    def copy(self, **changes: Any) -> "Trip":
        changes.setdefault("extra", dict(self.extra))
        return replace(self, **changes)


@dataclass(slots=True)
class RouteGroup:
    """Benannte Regel zur Einordnung einer Route."""

    name: str
    codes: List[str] = field(default_factory=list)
    is_full: bool = False
    color: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RouteGroup":
        return cls(
            name=str(data["name"]),
            codes=[str(code) for code in data.get("codes", [])],
            is_full=bool(data.get("isFull", False)),
            color=str(data.get("color", "")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "codes": list(self.codes), "isFull": self.is_full, "color": self.color}


TIME_SETTING_KEYS = {
    "lateEndHour": "late_end_hour",
    "earlyStartHour": "early_start_hour",
    "earlyEndHour": "early_end_hour",
    "lateStartHour": "late_start_hour",
    "restMessage": "rest_message",
    "earlyMessage": "early_message",
    "enableRestWarning": "enable_rest_warning",
    "enableEarlyWarning": "enable_early_warning",
}


@dataclass(slots=True)
class TimeSettings:
    """Schwellwerte für Ruhezeit- und Frühstart-Hinweise."""

    late_end_hour: int = 20
    early_start_hour: int = 7
    early_end_hour: int = 17
    late_start_hour: int = 9
    rest_message: str = "Driver has had too little rest between shifts."
    early_message: str = "Consider assigning this driver to an earlier start time."
    enable_rest_warning: bool = True
    enable_early_warning: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base: Optional["TimeSettings"] = None) -> "TimeSettings":
        """Überlagert gespeicherte Werte über ``base`` (Standard: Defaults)."""

        merged = base.to_dict() if base is not None else cls().to_dict()
        merged.update({key: value for key, value in data.items() if key in TIME_SETTING_KEYS})
        return cls(
            late_end_hour=int(merged["lateEndHour"]),
            early_start_hour=int(merged["earlyStartHour"]),
            early_end_hour=int(merged["earlyEndHour"]),
            late_start_hour=int(merged["lateStartHour"]),
            rest_message=str(merged["restMessage"]),
            early_message=str(merged["earlyMessage"]),
            enable_rest_warning=bool(merged["enableRestWarning"]),
            enable_early_warning=bool(merged["enableEarlyWarning"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {key: getattr(self, attr) for key, attr in TIME_SETTING_KEYS.items()}


__all__ = ["Trip", "RouteGroup", "TimeSettings"]
