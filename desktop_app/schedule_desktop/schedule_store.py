"""Linker und rechter Arbeitsstand mit optimistischer Speicherung."""

from __future__ import annotations

import datetime as dt
import logging
from concurrent.futures import FIRST_EXCEPTION, Executor, Future, ThreadPoolExecutor, wait
from threading import RLock
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple

from .api_client import ApiClient, ApiError
from .calendar_text import filter_ignored
from .config import DEFAULT_LEFT_ENDPOINT, DEFAULT_RIGHT_ENDPOINT
from .models import Trip

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load data"

Transform = Callable[[List[Trip]], List[Trip]]

SIDE_LABELS = {"left": "linken", "right": "rechten"}


class PersistResult(NamedTuple):
    """Neuer Listenstand und der laufende Speicherauftrag dazu."""

    items: List[Trip]
    future: "Future[None]"


def _log_persist_failure(side: str) -> Callable[["Future[None]"], None]:
    def callback(future: "Future[None]") -> None:
        exc = future.exception()
        if exc is not None:
            logger.warning("Speichern der %s-Liste fehlgeschlagen: %s", side, exc)

    return callback


def _date_sort_key(value: str) -> Tuple[int, object]:
    try:
        return (0, dt.date.fromisoformat(value[:10]))
    except ValueError:
        return (1, value)


def split_by_date(trips: Sequence[Trip]) -> Tuple[List[Trip], List[Trip]]:
    """Teilt einen Import nach ``Date_field``: frühester Tag links, nächster rechts."""

    by_date: Dict[str, List[Trip]] = {}
    for trip in trips:
        day = trip.extra.get("Date_field")
        if not day:
            continue
        by_date.setdefault(str(day), []).append(trip)
    dates = sorted(by_date, key=_date_sort_key)
    left = by_date[dates[0]] if dates else []
    right = by_date[dates[1]] if len(dates) > 1 else []
    return left, right


class ScheduleDataStore:
    """Zwei unabhängig gespeicherte Tourenlisten.

    ``load`` lädt beide Listen parallel und übernimmt sie nur gemeinsam.
    ``update_left``/``update_right`` wenden eine reine Transformation sofort
    an und speichern danach die gesamte neue Liste im Hintergrund. Fehler beim
    Speichern werden protokolliert, der Speicherzustand wird nicht
    zurückgesetzt.
    """

    def __init__(self, client: ApiClient, left_endpoint: str = DEFAULT_LEFT_ENDPOINT,
                 right_endpoint: str = DEFAULT_RIGHT_ENDPOINT, *, executor: Optional[Executor] = None) -> None:
        self.client = client
        self.left_endpoint = left_endpoint
        self.right_endpoint = right_endpoint
        self.left: List[Trip] = []
        self.right: List[Trip] = []
        self.error: Optional[str] = None
        self.is_loading = False
        self._lock = RLock()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=4, thread_name_prefix="schedule-store")
        self._writers = {
            side: ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"schedule-store-{side}")
            for side in ("left", "right")
        }
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Laden
    # ------------------------------------------------------------------
    def load(self) -> bool:
        if self._closed:
            return False
        self.is_loading = True
        try:
            left_future = self._executor.submit(self.client.fetch_trips, self.left_endpoint)
            right_future = self._executor.submit(self.client.fetch_trips, self.right_endpoint)
            wait([left_future, right_future], return_when=FIRST_EXCEPTION)
            try:
                left = left_future.result()
                right = right_future.result()
            except ApiError as exc:
                logger.error("Laden der Tourenlisten fehlgeschlagen: %s", exc)
                if not self._closed:
                    self.error = str(exc) or LOAD_ERROR_MESSAGE
                return False
        finally:
            self.is_loading = False
        if self._closed:
            return False
        with self._lock:
            self.left = left
            self.right = right
            self.error = None
        return True

    # ------------------------------------------------------------------
    # Änderungen
    # ------------------------------------------------------------------
    def update_left(self, transform: Transform) -> PersistResult:
        return self._update("left", self.left_endpoint, transform)

    def update_right(self, transform: Transform) -> PersistResult:
        return self._update("right", self.right_endpoint, transform)

    def _update(self, side: str, endpoint: str, transform: Transform) -> PersistResult:
        # Ein Schreib-Thread je Seite: Speicheraufträge erreichen den Server
        # in derselben Reihenfolge wie die Änderungen.
        with self._lock:
            if self._closed:
                raise RuntimeError("ScheduleDataStore is closed")
            items = list(transform(list(getattr(self, side))))
            setattr(self, side, items)
            future = self._writers[side].submit(self.client.save_trips, endpoint, list(items))
        future.add_done_callback(_log_persist_failure(SIDE_LABELS[side]))
        return PersistResult(items, future)

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------
    def import_trips(self, trips: Sequence[Trip], ignored_patterns: Sequence[str] = ()) -> bool:
        """Lädt einen Export hoch (zwei Tage) und liest danach beide Listen neu.

        Bereits gesetzte Fahrer bleiben serverseitig erhalten. Fehler beim
        Hochladen werden als :class:`ApiError` weitergereicht.
        """

        left, right = split_by_date(filter_ignored(trips, ignored_patterns))
        futures = [
            self._executor.submit(self.client.save_trips, self.left_endpoint, left, preserve_drivers=True),
            self._executor.submit(self.client.save_trips, self.right_endpoint, right, preserve_drivers=True),
        ]
        wait(futures, return_when=FIRST_EXCEPTION)
        for future in futures:
            future.result()
        return self.load()

    def clear(self) -> None:
        """Leert beide Listen auf dem Server und lokal."""

        futures = [
            self._executor.submit(self.client.clear_trips, self.left_endpoint),
            self._executor.submit(self.client.clear_trips, self.right_endpoint),
        ]
        wait(futures, return_when=FIRST_EXCEPTION)
        for future in futures:
            future.result()
        with self._lock:
            self.left = []
            self.right = []

    def close(self) -> None:
        self._closed = True
        for writer in self._writers.values():
            writer.shutdown(wait=False)
        if self._owns_executor:
            self._executor.shutdown(wait=False)


__all__ = [
    "DEFAULT_LEFT_ENDPOINT",
    "DEFAULT_RIGHT_ENDPOINT",
    "LOAD_ERROR_MESSAGE",
    "PersistResult",
    "ScheduleDataStore",
    "split_by_date",
]
