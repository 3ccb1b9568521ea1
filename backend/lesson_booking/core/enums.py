"""Enumerations shared by models, schemas and scheduling logic."""

from enum import Enum


class LessonStatus(str, Enum):
    """Lesson lifecycle statuses."""

    BOOKED = "booked"
    COMPLETED = "completed"
    MISSED = "missed"
    CANCELLED_BY_TEACHER = "cancelled_by_teacher"
    CANCELLED_BY_STUDENT = "cancelled_by_student"


CANCELLED_STATUSES = (
    LessonStatus.CANCELLED_BY_TEACHER.value,
    LessonStatus.CANCELLED_BY_STUDENT.value,
)


class CancelledBy(str, Enum):
    """Who cancelled a lesson."""

    TEACHER = "teacher"
    STUDENT = "student"

    @property
    def lesson_status(self) -> LessonStatus:
        if self is CancelledBy.TEACHER:
            return LessonStatus.CANCELLED_BY_TEACHER
        return LessonStatus.CANCELLED_BY_STUDENT
