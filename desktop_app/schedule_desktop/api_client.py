"""HTTP-Client für die Tourenlisten der Schedule API."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Optional, Sequence
from urllib.parse import urljoin

import requests

from .models import Trip

logger = logging.getLogger(__name__)


class ApiError(RuntimeError):
    """Fehler beim Zugriff auf die API."""

    def __init__(self, message: str, *, status_code: Optional[int] = None,
                 response: Optional[requests.Response] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class PayloadError(ApiError):
    """Antwort war kein lesbares JSON."""


def _bare_list(payload: Any) -> Optional[list]:
    return payload if isinstance(payload, list) else None


def _keyed(key: str) -> Callable[[Any], Optional[list]]:
    def extract(payload: Any) -> Optional[list]:
        if isinstance(payload, dict) and isinstance(payload.get(key), list):
            return payload[key]
        return None

    return extract


# Ältere Exporte verwenden abweichende Schlüssel; nicht weiter ausbauen.
TRIP_EXTRACTORS: Sequence[Callable[[Any], Optional[list]]] = (
    _bare_list,
    _keyed("trips"),
    _keyed("Schedule_Trips"),
    _keyed("schedule_trips"),
    _keyed("scheduleTrips"),
)


def unwrap_trips(payload: Any) -> List[dict]:
    """Liefert die Tourenliste aus einer Liste oder einem Objekt mit Altschlüssel."""

    for extract in TRIP_EXTRACTORS:
        items = extract(payload)
        if items is not None:
            return items
    return []


def decode_trips(items: Iterable[Any]) -> List[Trip]:
    trips: List[Trip] = []
    for item in items:
        if not isinstance(item, dict):
            logger.warning("Ungültiger Tourdatensatz übersprungen: %r", item)
            continue
        trips.append(Trip.from_dict(item))
    return trips


class ApiClient:
    """Kapselt HTTP-Aufrufe zur Schedule API."""

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: int = 15) -> None:
        self.base_url = base_url.rstrip("/") + "/"
        self.token = token
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Hilfsfunktionen
    # ------------------------------------------------------------------
    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = urljoin(self.base_url, path.lstrip("/"))
        kwargs.setdefault("timeout", self.timeout)
        headers = kwargs.setdefault("headers", {})
        headers.update(self._headers())
        try:
            response = requests.request(method, url, **kwargs)
        except requests.RequestException as exc:
            raise ApiError(str(exc)) from exc

        if not 200 <= response.status_code < 300:
            raise ApiError(f"Request failed: {response.status_code}", status_code=response.status_code,
                           response=response)
        return response

    # ------------------------------------------------------------------
    # Tourenlisten
    # ------------------------------------------------------------------
    def fetch_trips(self, path: str) -> List[Trip]:
        response = self._request("GET", path)
        try:
            payload = response.json()
        except ValueError as exc:
            raise PayloadError(f"Invalid JSON from {path}: {exc}", status_code=response.status_code,
                               response=response) from exc
        return decode_trips(unwrap_trips(payload))

    def save_trips(self, path: str, trips: Iterable[Trip], *, preserve_drivers: bool = False) -> None:
        """Überschreibt die komplette Liste auf dem Server."""

        payload: dict[str, Any] = {"trips": [trip.to_dict() for trip in trips]}
        if preserve_drivers:
            payload["preserveDrivers"] = True
        self._request("POST", path, json=payload)

    def clear_trips(self, path: str) -> None:
        self._request("DELETE", path)


__all__ = ["ApiClient", "ApiError", "PayloadError", "TRIP_EXTRACTORS", "decode_trips", "unwrap_trips"]
