# backend/lesson_booking/repositories/lesson_repository.py
"""
Lesson Repository for the lesson booking service.

Handles reads of a teacher's active lessons and the guarded lesson insert.

The insert is a single statement:

    INSERT INTO lessons (...)
    SELECT :id, :teacher_id, ...
    WHERE NOT EXISTS (SELECT 1 FROM lessons WHERE <same teacher, active, overlapping>)

so the overlap check and the write cannot be separated by another commit.
Zero inserted rows means another lesson already holds part of the interval.
"""

from datetime import datetime, timedelta
from decimal import Decimal
import logging
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    Integer,
    Numeric,
    String,
    and_,
    insert,
    literal,
    select,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.enums import CANCELLED_STATUSES, LessonStatus
from ..core.exceptions import RepositoryException
from ..core.ulid_helper import generate_ulid
from ..models.lesson import Lesson
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


def _active_overlap_clause(teacher_id: str, start: datetime, end: datetime):
    return and_(
        Lesson.teacher_id == teacher_id,
        Lesson.status.notin_(CANCELLED_STATUSES),
        Lesson.scheduled_time < end,
        Lesson.scheduled_end > start,
    )


class LessonRepository(BaseRepository[Lesson]):
    """Repository for lesson (booking) data access."""

    def __init__(self, db: Session):
        super().__init__(db, Lesson)

    def get_active_lessons_for_teacher(
        self, teacher_id: str, window_start: datetime, window_end: datetime
    ) -> List[Lesson]:
        """
        Non-cancelled lessons of a teacher that intersect [window_start, window_end).

        Returns:
            Lessons ordered by start time
        """
        try:
            return (
                self.db.query(Lesson)
                .filter(_active_overlap_clause(teacher_id, window_start, window_end))
                .order_by(Lesson.scheduled_time)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting active lessons for teacher {teacher_id}: {str(e)}")
            raise RepositoryException(f"Failed to get lessons: {str(e)}")

    def get_overlapping_lessons(
        self, teacher_id: str, start: datetime, duration_minutes: int
    ) -> List[Lesson]:
        end = start + timedelta(minutes=duration_minutes)
        return self.get_active_lessons_for_teacher(teacher_id, start, end)

    def has_free_trial_lesson(self, learner_id: str) -> bool:
        """True when the learner has any lesson flagged as a free trial."""
        try:
            stmt = select(Lesson.id).where(
                Lesson.learner_id == learner_id, Lesson.is_free_trial.is_(True)
            )
            return self.db.execute(stmt.limit(1)).first() is not None
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking free trial history for {learner_id}: {str(e)}")
            raise RepositoryException(f"Failed to check free trial history: {str(e)}")

    def create_if_no_overlap(
        self,
        *,
        teacher_id: str,
        learner_id: str,
        scheduled_time: datetime,
        duration_minutes: int,
        price_charged: Decimal,
        is_free_trial: bool,
        teacher_rate_at_booking: Optional[Decimal] = None,
        parent_id: Optional[str] = None,
        subject_id: Optional[str] = None,
    ) -> Optional[Lesson]:
        """
        Insert a booked lesson unless an active lesson of the teacher overlaps it.

        Note: Does NOT commit. SQLAlchemy errors (including exclusion constraint
        violations on PostgreSQL) propagate unchanged so the caller can classify them.

        Returns:
            The created lesson, or None when the interval is already taken
        """
        lesson_id = generate_ulid()
        scheduled_end = scheduled_time + timedelta(minutes=duration_minutes)

        values = [
            (Lesson.id, literal(lesson_id, String(26))),
            (Lesson.teacher_id, literal(teacher_id, String(26))),
            (Lesson.learner_id, literal(learner_id, String(26))),
            (Lesson.parent_id, literal(parent_id, String(26))),
            (Lesson.subject_id, literal(subject_id, String(26))),
            (Lesson.scheduled_time, literal(scheduled_time, DateTime())),
            (Lesson.scheduled_end, literal(scheduled_end, DateTime())),
            (Lesson.duration_minutes, literal(duration_minutes, Integer())),
            (Lesson.status, literal(LessonStatus.BOOKED.value, String(30))),
            (Lesson.is_free_trial, literal(is_free_trial, Boolean())),
            (Lesson.teacher_rate_at_booking, literal(teacher_rate_at_booking, Numeric(10, 2))),
            (Lesson.price_charged, literal(price_charged, Numeric(10, 2))),
        ]

        overlap_exists = (
            select(Lesson.id)
            .where(_active_overlap_clause(teacher_id, scheduled_time, scheduled_end))
            .correlate(None)
            .exists()
        )
        source = select(*[value for _, value in values]).where(~overlap_exists)
        stmt = insert(Lesson).from_select([column for column, _ in values], source)

        result = self.db.execute(stmt)
        if result.rowcount == 0:
            self.logger.info(
                "Conditional insert skipped: teacher %s already booked within %s-%s",
                teacher_id,
                scheduled_time,
                scheduled_end,
            )
            return None

        return self.db.get(Lesson, lesson_id)
