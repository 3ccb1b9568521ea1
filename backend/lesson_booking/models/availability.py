# backend/lesson_booking/models/availability.py
"""
Availability models for the lesson booking service.

This module defines the database models for managing teacher availability.

Classes:
    RecurringAvailability: Weekly, day-of-week scoped availability windows
    OneOffAvailability: Single-date exceptions to the weekly pattern
    BlockedDate: Dates on which a teacher takes no lessons at all
"""

import logging

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..database import Base

logger = logging.getLogger(__name__)


class RecurringAvailability(Base):
    """A teacher's weekly availability window (0 = Sunday ... 6 = Saturday)."""

    __tablename__ = "teacher_availability"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    teacher_id = Column(
        String(26), ForeignKey("teacher_profiles.id", ondelete="CASCADE"), nullable=False
    )
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    teacher = relationship("TeacherProfile", back_populates="recurring_availability")

    __table_args__ = (
        CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="ck_availability_day_of_week"),
        Index("idx_teacher_availability_teacher_day", "teacher_id", "day_of_week"),
    )

    def __repr__(self) -> str:
        return (
            f"<RecurringAvailability teacher={self.teacher_id} day={self.day_of_week} "
            f"{self.start_time}-{self.end_time} available={self.is_available}>"
        )


class OneOffAvailability(Base):
    """A single calendar date's exception to the weekly pattern."""

    __tablename__ = "teacher_availability_one_off"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    teacher_id = Column(
        String(26), ForeignKey("teacher_profiles.id", ondelete="CASCADE"), nullable=False
    )
    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    teacher = relationship("TeacherProfile", back_populates="one_off_availability")

    __table_args__ = (Index("idx_teacher_availability_one_off_teacher_date", "teacher_id", "date"),)

    def __repr__(self) -> str:
        return (
            f"<OneOffAvailability teacher={self.teacher_id} date={self.date} "
            f"{self.start_time}-{self.end_time} available={self.is_available}>"
        )


class BlockedDate(Base):
    """Teacher vacation/unavailable days"""

    __tablename__ = "blocked_dates"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    teacher_id = Column(
        String(26), ForeignKey("teacher_profiles.id", ondelete="CASCADE"), nullable=False
    )
    date = Column(Date, nullable=False, index=True)
    reason = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    teacher = relationship("TeacherProfile", back_populates="blocked_dates")

    __table_args__ = (
        UniqueConstraint("teacher_id", "date", name="unique_teacher_blocked_date"),
        Index("idx_blocked_dates_teacher_date", "teacher_id", "date"),
    )

    def __repr__(self) -> str:
        return f"<BlockedDate {self.date} - {self.reason or 'No reason'}>"
