from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Sequence, Type

from sqlalchemy.orm import Session

from .models import LeftScheduleTrip, RightScheduleTrip

logger = logging.getLogger(__name__)

TripModel = Type[LeftScheduleTrip] | Type[RightScheduleTrip]


def _trip_id(item: Dict[str, Any]) -> str | None:
    value = item.get("ID") or item.get("id")
    if value in (None, ""):
        return None
    return str(value)


def filter_ignored(items: Iterable[Dict[str, Any]], patterns: Sequence[str]) -> List[Dict[str, Any]]:
    lowered = [pattern.lower() for pattern in patterns if pattern]
    return [
        item
        for item in items
        if not any(pattern in str(item.get("Calendar_Name") or "").lower() for pattern in lowered)
    ]


def list_trips(db: Session, model: TripModel, ignored_patterns: Sequence[str]) -> List[Dict[str, Any]]:
    records = db.query(model).order_by(model.position).all()
    return filter_ignored((dict(record.data) for record in records), ignored_patterns)


def _preserved_values(db: Session, model: TripModel, fields: Sequence[str]) -> Dict[str, Dict[str, Any]]:
    existing: Dict[str, Dict[str, Any]] = {}
    for record in db.query(model).all():
        data = record.data or {}
        existing[record.id] = {field: data[field] for field in fields if data.get(field) is not None}
    return existing


def replace_trips(
    db: Session,
    model: TripModel,
    trips: Sequence[Dict[str, Any]],
    *,
    ignored_patterns: Sequence[str],
    preserve: bool = False,
    preserve_fields: Sequence[str] = (),
) -> int:
    """Overwrite the stored list with ``trips``.

    With ``preserve`` set, fields listed in ``preserve_fields`` keep their
    stored value for trips whose ID already exists. Records without an ID are
    skipped; a repeated ID keeps its first position and its last payload.
    """
    items = list(trips)
    if preserve and preserve_fields:
        existing = _preserved_values(db, model, preserve_fields)
        merged: List[Dict[str, Any]] = []
        for item in items:
            identifier = _trip_id(item)
            if identifier is not None and identifier in existing:
                item = {**item, **existing[identifier]}
            merged.append(item)
        items = merged

    records: Dict[str, Dict[str, Any]] = {}
    skipped = 0
    for item in filter_ignored(items, ignored_patterns):
        identifier = _trip_id(item)
        if identifier is None:
            skipped += 1
            continue
        records[identifier] = item
    if skipped:
        logger.warning("Skipped %d trips without ID for %s", skipped, model.__tablename__)

    db.query(model).delete()
    for position, (identifier, item) in enumerate(records.items()):
        db.add(model(id=identifier, position=position, data=item))
    db.commit()
    logger.info("Stored %d trips in %s", len(records), model.__tablename__)
    return len(records)


def clear_trips(db: Session, model: TripModel) -> None:
    db.query(model).delete()
    db.commit()
