"""
Database models for the lesson booking service.

The models are organized by functionality:
- Teacher profiles, subjects and per-subject rates
- Availability management (recurring, one-off, blocked dates)
- Learners
- Lessons (bookings)
"""

from .availability import BlockedDate, OneOffAvailability, RecurringAvailability
from .learner import Learner
from .lesson import CANCELLED_STATUSES, Lesson, LessonStatus
from .teacher import Subject, TeacherProfile, TeacherSubjectRate

__all__ = [
    "BlockedDate",
    "CANCELLED_STATUSES",
    "Learner",
    "Lesson",
    "LessonStatus",
    "OneOffAvailability",
    "RecurringAvailability",
    "Subject",
    "TeacherProfile",
    "TeacherSubjectRate",
]
