# backend/lesson_booking/repositories/__init__.py
"""
Repository layer for the lesson booking service.

Key Components:
- BaseRepository: Foundation for all repositories (get by id, create)
- RepositoryFactory: Factory for creating repository instances
- AvailabilityRepository: Recurring rules, one-off overrides and blocked dates
- LessonRepository: Active lessons and the overlap-guarded lesson insert
- LearnerRepository: Learners owned by a parent account
- TeacherRepository: Teacher profiles, subjects and subject rates

Usage:
    from lesson_booking.repositories import RepositoryFactory

    repository = RepositoryFactory.create_lesson_repository(db)
    lessons = repository.get_active_lessons_for_teacher(teacher_id, start, end)
"""

from .availability_repository import AvailabilityRepository
from .base_repository import BaseRepository, IRepository
from .factory import RepositoryFactory
from .learner_repository import LearnerRepository
from .lesson_repository import LessonRepository
from .teacher_repository import TeacherRepository

__all__ = [
    "AvailabilityRepository",
    "BaseRepository",
    "IRepository",
    "LearnerRepository",
    "LessonRepository",
    "RepositoryFactory",
    "TeacherRepository",
]
