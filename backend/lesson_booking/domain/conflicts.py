"""Half-open interval overlap between a candidate lesson and existing lessons."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable, List, Optional

from ..core.enums import CANCELLED_STATUSES, LessonStatus


@dataclass(frozen=True)
class BookedInterval:
    """An existing lesson reduced to the fields conflict detection needs."""

    start: datetime
    end: datetime
    lesson_id: Optional[str] = None
    status: str = LessonStatus.BOOKED.value

    @classmethod
    def from_lesson(cls, lesson: Any) -> "BookedInterval":
        end = lesson.scheduled_end or lesson.scheduled_time + timedelta(
            minutes=lesson.duration_minutes
        )
        return cls(
            start=lesson.scheduled_time,
            end=end,
            lesson_id=lesson.id,
            status=lesson.status,
        )

    @property
    def is_cancelled(self) -> bool:
        return self.status in CANCELLED_STATUSES


def intervals_overlap(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> bool:
    """Half-open [start, end) intersection; touching edges do not overlap."""
    return start_a < end_b and end_a > start_b


def find_conflicts(
    candidate_start: datetime, duration_minutes: int, booked: Iterable[BookedInterval]
) -> List[BookedInterval]:
    candidate_end = candidate_start + timedelta(minutes=duration_minutes)
    return [
        interval
        for interval in booked
        if not interval.is_cancelled
        and intervals_overlap(candidate_start, candidate_end, interval.start, interval.end)
    ]


def has_conflict(
    candidate_start: datetime, duration_minutes: int, booked: Iterable[BookedInterval]
) -> bool:
    return bool(find_conflicts(candidate_start, duration_minutes, booked))
