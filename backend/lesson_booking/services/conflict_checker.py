# backend/lesson_booking/services/conflict_checker.py
"""
Conflict Checker Service for the lesson booking service.

Checks a candidate lesson interval against a teacher's existing,
non-cancelled lessons. Intervals are half-open, so a lesson ending at
15:00 does not conflict with one starting at 15:00, and any mix of
30 and 60 minute durations is compared the same way.
"""

from datetime import datetime, timedelta
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.clock import Clock, system_clock
from ..domain.conflicts import BookedInterval, find_conflicts
from ..repositories.factory import RepositoryFactory
from ..repositories.lesson_repository import LessonRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class ConflictChecker(BaseService):
    """Service for checking lesson conflicts."""

    def __init__(
        self,
        db: Session,
        clock: Clock = system_clock,
        repository: Optional[LessonRepository] = None,
    ):
        super().__init__(db, clock)
        self.repository = repository or RepositoryFactory.create_lesson_repository(db)

    @BaseService.measure_operation("get_booked_intervals")
    def get_booked_intervals(
        self, teacher_id: str, window_start: datetime, window_end: datetime
    ) -> List[BookedInterval]:
        """Active lessons of the teacher intersecting the window, as plain intervals."""
        lessons = self.repository.get_active_lessons_for_teacher(
            teacher_id, window_start, window_end
        )
        return [BookedInterval.from_lesson(lesson) for lesson in lessons]

    @BaseService.measure_operation("check_lesson_conflicts")
    def check_lesson_conflicts(
        self,
        teacher_id: str,
        start: datetime,
        duration_minutes: int,
        exclude_lesson_id: Optional[str] = None,
    ) -> List[BookedInterval]:
        """
        Find existing lessons overlapping [start, start + duration).

        Args:
            teacher_id: The teacher to check
            start: Candidate start instant
            duration_minutes: Candidate duration
            exclude_lesson_id: A lesson to ignore (e.g. the one being moved)

        Returns:
            The conflicting lessons; empty when the interval is free
        """
        booked = self.get_booked_intervals(
            teacher_id, start, start + timedelta(minutes=duration_minutes)
        )
        if exclude_lesson_id:
            booked = [interval for interval in booked if interval.lesson_id != exclude_lesson_id]

        conflicts = find_conflicts(start, duration_minutes, booked)
        if conflicts:
            self.logger.warning(
                "Found %d conflicting lesson(s) for teacher %s at %s (%d min)",
                len(conflicts),
                teacher_id,
                start,
                duration_minutes,
            )
        return conflicts
