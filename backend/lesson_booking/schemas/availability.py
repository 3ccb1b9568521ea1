"""Availability response schemas."""

import datetime as dt
from typing import List, Optional

from pydantic import Field, field_serializer

from .base import StandardizedModel


class SlotResponse(StandardizedModel):
    time: dt.time
    bookable: bool

    @field_serializer("time")
    def _serialize_time(self, value: dt.time) -> str:
        return value.strftime("%H:%M")


class DayAvailabilityResponse(StandardizedModel):
    """All 48 grid slots of one date; every slot is closed when ``error`` is set."""

    teacher_id: str
    date: dt.date
    duration_minutes: int
    slots: List[SlotResponse]
    error: Optional[str] = None


class BookableSlotsResponse(StandardizedModel):
    teacher_id: str
    start_date: dt.date
    end_date: dt.date
    duration_minutes: int
    starts: List[dt.datetime] = Field(default_factory=list)
    error: Optional[str] = None
