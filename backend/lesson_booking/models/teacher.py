# backend/lesson_booking/models/teacher.py
"""
Teacher pricing models.

A teacher has a profile-level hourly rate and optional per-subject rates.
Subjects carry a platform minimum rate that no teacher rate may undercut.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..database import Base


class TeacherProfile(Base):
    """Teacher profile with the default hourly rate."""

    __tablename__ = "teacher_profiles"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    display_name = Column(String(255), nullable=False)
    hourly_rate = Column(Numeric(10, 2), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    recurring_availability = relationship(
        "RecurringAvailability", back_populates="teacher", cascade="all, delete-orphan"
    )
    one_off_availability = relationship(
        "OneOffAvailability", back_populates="teacher", cascade="all, delete-orphan"
    )
    blocked_dates = relationship("BlockedDate", back_populates="teacher", cascade="all, delete-orphan")
    subject_rates = relationship(
        "TeacherSubjectRate", back_populates="teacher", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<TeacherProfile {self.id}: {self.display_name} rate={self.hourly_rate}>"


class Subject(Base):
    """A subject taught on the platform."""

    __tablename__ = "subjects"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    slug = Column(String(100), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    minimum_rate = Column(Numeric(10, 2), nullable=True)

    def __repr__(self) -> str:
        return f"<Subject {self.slug}>"


class TeacherSubjectRate(Base):
    """Per-subject hourly rate a teacher charges."""

    __tablename__ = "teacher_subject_rates"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    teacher_id = Column(
        String(26), ForeignKey("teacher_profiles.id", ondelete="CASCADE"), nullable=False
    )
    subject_id = Column(String(26), ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False)
    hourly_rate = Column(Numeric(10, 2), nullable=True)
    is_enabled = Column(Boolean, nullable=False, default=True)

    teacher = relationship("TeacherProfile", back_populates="subject_rates")
    subject = relationship("Subject")

    __table_args__ = (
        UniqueConstraint("teacher_id", "subject_id", name="unique_teacher_subject_rate"),
        CheckConstraint("hourly_rate IS NULL OR hourly_rate >= 0", name="check_rate_non_negative"),
    )
