from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Older exports use different keys for the trip list; checked in this order.
LEGACY_TRIP_KEYS = ("trips", "Schedule_Trips", "schedule_trips", "scheduleTrips")


class TripListPayload(BaseModel):
    """Body of a list upload: a bare list or an object carrying the list."""

    model_config = ConfigDict(populate_by_name=True)

    trips: Optional[List[Dict[str, Any]]] = None
    preserve_drivers: bool = Field(default=False, alias="preserveDrivers")

    @model_validator(mode="before")
    @classmethod
    def _unwrap(cls, value: Any) -> Any:
        if isinstance(value, list):
            return {"trips": value}
        if not isinstance(value, dict):
            return value
        preserve = bool(value.get("preserveDrivers", value.get("preserve_drivers", False)))
        for key in LEGACY_TRIP_KEYS:
            if isinstance(value.get(key), list):
                return {"trips": value[key], "preserveDrivers": preserve}
        return {"trips": None, "preserveDrivers": preserve}


class MessageResponse(BaseModel):
    message: str
