# backend/lesson_booking/models/lesson.py
"""
Lesson (booking) model for the lesson booking service.

A lesson stores its own teacher, learner, start and end instants, so
overlap checks never need to consult availability rules.

Invariant: for a given teacher, no two lessons outside the cancelled
statuses may have overlapping [scheduled_time, scheduled_end) intervals.
The booking repository enforces this with a conditional insert; on
PostgreSQL the exclusion constraint below enforces it as well.
"""

from datetime import datetime, timedelta
import logging
from typing import Any, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
    literal_column,
    text,
)
from sqlalchemy.dialects.postgresql import ExcludeConstraint
import ulid

from ..core.config import settings
from ..core.enums import CANCELLED_STATUSES, LessonStatus
from ..database import Base

logger = logging.getLogger(__name__)

OVERLAP_CONSTRAINT_NAME = "lessons_no_overlap_per_teacher"
FREE_TRIAL_INDEX_NAME = "uq_lessons_one_free_trial_per_learner"
ALL_STATUSES = tuple(status.value for status in LessonStatus)


class Lesson(Base):
    """A booked lesson between a learner and a teacher."""

    __tablename__ = "lessons"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))

    teacher_id = Column(String(26), ForeignKey("teacher_profiles.id"), nullable=False)
    learner_id = Column(String(26), ForeignKey("learners.id"), nullable=False)
    parent_id = Column(String(26), nullable=True)
    subject_id = Column(String(26), ForeignKey("subjects.id"), nullable=True)

    scheduled_time = Column(DateTime, nullable=False)
    scheduled_end = Column(DateTime, nullable=False)
    duration_minutes = Column(Integer, nullable=False)

    status = Column(String(30), nullable=False, default=LessonStatus.BOOKED.value, index=True)
    is_free_trial = Column(Boolean, nullable=False, default=False)
    teacher_rate_at_booking = Column(Numeric(10, 2), nullable=True)
    price_charged = Column(Numeric(10, 2), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    cancelled_at = Column(DateTime, nullable=True)
    cancellation_reason = Column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ({})".format(", ".join(f"'{value}'" for value in ALL_STATUSES)),
            name="ck_lessons_status",
        ),
        CheckConstraint("duration_minutes > 0", name="check_duration_positive"),
        CheckConstraint("price_charged >= 0", name="check_price_non_negative"),
        CheckConstraint("scheduled_end > scheduled_time", name="check_time_order"),
        Index("idx_lessons_teacher_schedule", "teacher_id", "scheduled_time", "scheduled_end"),
        Index("idx_lessons_learner_trial", "learner_id", "is_free_trial"),
        # At most one free trial per learner, cancelled trials included.
        Index(
            FREE_TRIAL_INDEX_NAME,
            "learner_id",
            unique=True,
            postgresql_where=text("is_free_trial"),
            sqlite_where=text("is_free_trial = 1"),
        ),
    )

    def __init__(self, **kwargs: Any) -> None:
        """Derive the end instant when only a duration is given."""
        if kwargs.get("scheduled_end") is None and kwargs.get("scheduled_time") is not None:
            duration = kwargs.get("duration_minutes")
            if duration:
                kwargs["scheduled_end"] = kwargs["scheduled_time"] + timedelta(minutes=duration)
        super().__init__(**kwargs)
        if not self.status:
            self.status = LessonStatus.BOOKED.value

    def __repr__(self) -> str:
        return (
            f"<Lesson {self.id}: learner={self.learner_id}, teacher={self.teacher_id}, "
            f"time={self.scheduled_time}-{self.scheduled_end}, status={self.status}>"
        )

    @property
    def is_cancelled(self) -> bool:
        return self.status in CANCELLED_STATUSES

    def cancel(
        self, status: LessonStatus, cancelled_at: datetime, reason: Optional[str] = None
    ) -> None:
        """Cancel this lesson, releasing its interval."""
        if status.value not in CANCELLED_STATUSES:
            raise ValueError(f"{status.value} is not a cancellation status")
        self.status = status.value
        self.cancelled_at = cancelled_at
        self.cancellation_reason = reason
        logger.info(f"Lesson {self.id} cancelled with status {status.value}")


if not settings.is_sqlite:
    # Requires the btree_gist extension for the equality operator on teacher_id.
    Lesson.__table__.append_constraint(
        ExcludeConstraint(
            (Lesson.__table__.c.teacher_id, "="),
            (
                func.tsrange(
                    Lesson.__table__.c.scheduled_time,
                    Lesson.__table__.c.scheduled_end,
                    literal_column("'[)'"),
                ),
                "&&",
            ),
            name=OVERLAP_CONSTRAINT_NAME,
            using="gist",
            where=text(
                "status NOT IN ({})".format(", ".join(f"'{value}'" for value in CANCELLED_STATUSES))
            ),
        )
    )
