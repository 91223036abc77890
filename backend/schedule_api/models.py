from __future__ import annotations

import datetime as dt

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.dialects.sqlite import JSON as SQLiteJSON
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class _TripRecord:
    id = Column(String(120), primary_key=True)
    position = Column(Integer, nullable=False, default=0, index=True)
    data = Column(SQLiteJSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class LeftScheduleTrip(_TripRecord, Base):
    """Trips of the day the drivers are coming from."""

    __tablename__ = "schedule_trips_tool"


class RightScheduleTrip(_TripRecord, Base):
    """Trips of the day being planned."""

    __tablename__ = "schedule_trips_tool2"
