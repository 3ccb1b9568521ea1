# backend/lesson_booking/services/availability_service.py
"""
Availability Service for the lesson booking service.

Turns a teacher's stored rules and lessons into bookable slots. Every
candidate on the 48-slot daily grid goes through the same pipeline:

1. Availability resolution (one-off override at that start time, else the weekly rule)
2. Lead time and blackout (future, minimum notice, not a blocked date)
3. Conflict detection against non-cancelled lessons

If the rules or lessons cannot be read or decoded, the grid degrades to
every slot closed and carries the upstream error instead of a partial answer.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
import logging
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from ..core.clock import Clock, system_clock
from ..core.config import settings
from ..core.constants import DEFAULT_LISTING_DAYS
from ..core.exceptions import (
    AvailabilityDataException,
    RepositoryException,
    SlotUnavailableException,
    ValidationException,
)
from ..domain.availability_resolver import resolve_slot_open
from ..domain.availability_rules import TeacherRuleSet
from ..domain.booking_window import (
    BLOCKED_DATE,
    IN_PAST,
    INSUFFICIENT_NOTICE,
    booking_window_rejection,
)
from ..domain.conflicts import BookedInterval, find_conflicts
from ..domain.slot_grid import generate_slot_grid, is_grid_aligned, slot_start
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.availability_repository import AvailabilityRepository
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .conflict_checker import ConflictChecker

logger = logging.getLogger(__name__)

# Reasons a candidate slot is rejected, in pipeline order
REASON_NOT_ON_GRID = "not_on_grid"
REASON_CLOSED = "closed"
REASON_IN_PAST = IN_PAST
REASON_TOO_SOON = INSUFFICIENT_NOTICE
REASON_BLOCKED = BLOCKED_DATE
REASON_BEYOND_LOOKAHEAD = "beyond_lookahead"
REASON_CONFLICT = "conflict"


@dataclass(frozen=True)
class SlotAvailability:
    time: time
    bookable: bool


@dataclass(frozen=True)
class DayAvailability:
    """Bookable flags for all 48 grid slots of one date."""

    teacher_id: str
    date: date
    duration_minutes: int
    slots: List[SlotAvailability]
    error: Optional[str] = None

    @property
    def bookable_times(self) -> List[time]:
        return [slot.time for slot in self.slots if slot.bookable]


@dataclass(frozen=True)
class BookableSlotListing:
    """Bookable lesson starts over a date range, ascending."""

    teacher_id: str
    start_date: date
    end_date: date
    duration_minutes: int
    starts: List[datetime] = field(default_factory=list)
    error: Optional[str] = None


class AvailabilityService(BaseService):
    """Resolves bookable slots for a teacher."""

    def __init__(
        self,
        db: Session,
        clock: Clock = system_clock,
        repository: Optional[AvailabilityRepository] = None,
        conflict_checker: Optional[ConflictChecker] = None,
    ):
        super().__init__(db, clock)
        self.repository = repository or RepositoryFactory.create_availability_repository(db)
        self.conflict_checker = conflict_checker or ConflictChecker(db, clock)

    # Data loading

    def load_rules(self, teacher_id: str, start_date: date, end_date: date) -> TeacherRuleSet:
        """
        Read and decode the teacher's rules relevant to [start_date, end_date].

        Raises:
            RepositoryException: The rules could not be read
            AvailabilityDataException: A stored row could not be decoded
        """
        return TeacherRuleSet.from_rows(
            teacher_id,
            recurring_rows=self.repository.get_recurring_rules(teacher_id),
            override_rows=self.repository.get_one_off_overrides(teacher_id, start_date, end_date),
            blocked_rows=self.repository.get_blocked_dates(teacher_id, start_date, end_date),
        )

    def _load_booked(
        self, teacher_id: str, start_date: date, end_date: date, duration_minutes: int
    ) -> List[BookedInterval]:
        # A candidate late on end_date can run into the next day.
        window_start = datetime.combine(start_date, time.min)
        window_end = datetime.combine(end_date + timedelta(days=1), time.min) + timedelta(
            minutes=duration_minutes
        )
        return self.conflict_checker.get_booked_intervals(teacher_id, window_start, window_end)

    # Pipeline

    def _lookahead_end(self, now: datetime) -> date:
        return now.date() + timedelta(days=settings.availability_lookahead_days)

    def rejection_reason(
        self,
        rules: TeacherRuleSet,
        booked: Sequence[BookedInterval],
        day: date,
        slot_time: time,
        duration_minutes: int,
        now: datetime,
    ) -> Optional[str]:
        """Why a candidate slot is not bookable, or None when it is."""
        if not resolve_slot_open(rules, rules.teacher_id, day, slot_time):
            return REASON_CLOSED

        window_reason = booking_window_rejection(
            day, slot_time, now, rules.blocked_dates, settings.min_notice_hours
        )
        if window_reason is not None:
            return window_reason

        if find_conflicts(slot_start(day, slot_time), duration_minutes, booked):
            return REASON_CONFLICT
        return None

    def _validate_duration(self, duration_minutes: int) -> None:
        if duration_minutes not in settings.allowed_durations:
            raise ValidationException(
                f"Unsupported lesson duration: {duration_minutes} minutes",
                code="unsupported_duration",
                details={"allowed_durations": list(settings.allowed_durations)},
            )

    def _degrade(self, exc: Exception, teacher_id: str) -> str:
        reason = "repository_error" if isinstance(exc, RepositoryException) else "malformed_data"
        self.logger.error(
            "Availability for teacher %s unavailable, showing no slots: %s", teacher_id, exc
        )
        prometheus_metrics.record_availability_degraded(reason)
        return str(exc)

    # Public operations

    @BaseService.measure_operation("get_day_availability")
    def get_day_availability(
        self, teacher_id: str, day: date, duration_minutes: int
    ) -> DayAvailability:
        """
        Bookable flag for each of the 48 grid slots of ``day``.

        Raises:
            ValidationException: Unsupported duration
        """
        self._validate_duration(duration_minutes)
        now = self.clock()
        grid = generate_slot_grid()

        if day > self._lookahead_end(now):
            return DayAvailability(
                teacher_id=teacher_id,
                date=day,
                duration_minutes=duration_minutes,
                slots=[SlotAvailability(time=slot, bookable=False) for slot in grid],
            )

        try:
            rules = self.load_rules(teacher_id, day, day)
            booked = self._load_booked(teacher_id, day, day, duration_minutes)
        except (RepositoryException, AvailabilityDataException) as exc:
            return DayAvailability(
                teacher_id=teacher_id,
                date=day,
                duration_minutes=duration_minutes,
                slots=[SlotAvailability(time=slot, bookable=False) for slot in grid],
                error=self._degrade(exc, teacher_id),
            )

        slots = [
            SlotAvailability(
                time=slot,
                bookable=self.rejection_reason(rules, booked, day, slot, duration_minutes, now)
                is None,
            )
            for slot in grid
        ]
        return DayAvailability(
            teacher_id=teacher_id, date=day, duration_minutes=duration_minutes, slots=slots
        )

    @BaseService.measure_operation("list_bookable_slots")
    def list_bookable_slots(
        self,
        teacher_id: str,
        duration_minutes: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> BookableSlotListing:
        """
        Every bookable lesson start between two dates (inclusive), ascending.

        Defaults to the coming week; never reads past the lookahead window.
        """
        self._validate_duration(duration_minutes)
        now = self.clock()
        start_date = start_date or now.date()
        end_date = end_date or start_date + timedelta(days=DEFAULT_LISTING_DAYS)
        if end_date < start_date:
            raise ValidationException(
                "end_date must not be before start_date", code="invalid_date_range"
            )
        end_date = min(end_date, self._lookahead_end(now))

        listing_kwargs = dict(teacher_id=teacher_id, duration_minutes=duration_minutes)
        if end_date < start_date:
            return BookableSlotListing(start_date=start_date, end_date=start_date, **listing_kwargs)

        try:
            rules = self.load_rules(teacher_id, start_date, end_date)
            booked = self._load_booked(teacher_id, start_date, end_date, duration_minutes)
        except (RepositoryException, AvailabilityDataException) as exc:
            return BookableSlotListing(
                start_date=start_date,
                end_date=end_date,
                error=self._degrade(exc, teacher_id),
                **listing_kwargs,
            )

        starts: List[datetime] = []
        day = start_date
        while day <= end_date:
            for slot in generate_slot_grid():
                if self.rejection_reason(rules, booked, day, slot, duration_minutes, now) is None:
                    starts.append(slot_start(day, slot))
            day += timedelta(days=1)

        return BookableSlotListing(
            start_date=start_date, end_date=end_date, starts=starts, **listing_kwargs
        )

    @BaseService.measure_operation("ensure_slot_bookable")
    def ensure_slot_bookable(
        self, teacher_id: str, scheduled_time: datetime, duration_minutes: int
    ) -> None:
        """
        Re-run the full pipeline for one lesson start.

        Upstream read and decode errors propagate unchanged.

        Raises:
            SlotUnavailableException: The slot is not bookable right now
        """
        now = self.clock()
        reason: Optional[str] = None
        if not is_grid_aligned(scheduled_time):
            reason = REASON_NOT_ON_GRID
        elif scheduled_time.date() > self._lookahead_end(now):
            reason = REASON_BEYOND_LOOKAHEAD
        else:
            day = scheduled_time.date()
            rules = self.load_rules(teacher_id, day, day)
            booked = self._load_booked(teacher_id, day, day, duration_minutes)
            reason = self.rejection_reason(
                rules, booked, day, scheduled_time.time(), duration_minutes, now
            )

        if reason is not None:
            self.logger.info(
                "Slot %s for teacher %s rejected at commit: %s", scheduled_time, teacher_id, reason
            )
            raise SlotUnavailableException(
                details={
                    "teacher_id": teacher_id,
                    "scheduled_time": scheduled_time.isoformat(),
                    "duration_minutes": duration_minutes,
                    "reason": reason,
                }
            )

    def is_slot_bookable(
        self, teacher_id: str, scheduled_time: datetime, duration_minutes: int
    ) -> bool:
        try:
            self.ensure_slot_bookable(teacher_id, scheduled_time, duration_minutes)
        except SlotUnavailableException:
            return False
        return True
