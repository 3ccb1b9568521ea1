"""
Booking request and response schemas.

``BookingCreate`` deliberately accepts missing fields so an incomplete
request reaches the booking service and is reported as ``incomplete_request``
with the list of missing fields, rather than as a generic validation error.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from ..core.constants import MAX_REASON_LENGTH
from ..core.enums import CancelledBy
from .base import Money, StandardizedModel, StrictModel


class BookingCreate(StrictModel):
    learner_id: Optional[str] = None
    teacher_id: Optional[str] = None
    subject_id: Optional[str] = None
    scheduled_time: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    parent_id: Optional[str] = None

    @field_validator("learner_id", "teacher_id", "subject_id", "parent_id")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @field_validator("scheduled_time")
    @classmethod
    def _to_wall_clock(cls, value: Optional[datetime]) -> Optional[datetime]:
        # All scheduling uses one implicit zone; offsets are dropped, not converted.
        if value is None or value.tzinfo is None:
            return value
        return value.replace(tzinfo=None)

    def missing_fields(self) -> List[str]:
        required = ("learner_id", "teacher_id", "subject_id", "scheduled_time", "duration_minutes")
        return [name for name in required if getattr(self, name) is None]


class BookingCancel(StrictModel):
    cancelled_by: CancelledBy
    reason: Optional[str] = Field(default=None, max_length=MAX_REASON_LENGTH)


class LessonResponse(StandardizedModel):
    id: str
    teacher_id: str
    learner_id: str
    parent_id: Optional[str] = None
    subject_id: Optional[str] = None
    scheduled_time: datetime
    scheduled_end: datetime
    duration_minutes: int
    status: str
    is_free_trial: bool
    teacher_rate_at_booking: Optional[Money] = None
    price_charged: Money
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
