# backend/lesson_booking/repositories/factory.py
"""
Repository Factory for the lesson booking service.

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from .base_repository import BaseRepository

# Avoid circular imports
if TYPE_CHECKING:
    from .availability_repository import AvailabilityRepository
    from .learner_repository import LearnerRepository
    from .lesson_repository import LessonRepository
    from .teacher_repository import TeacherRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation to ensure consistent initialization
    and makes it easy to swap implementations if needed.
    """

    @staticmethod
    def create_base_repository(db: Session, model) -> BaseRepository:
        """Create a generic base repository for any model."""
        return BaseRepository(db, model)

    @staticmethod
    def create_availability_repository(db: Session) -> "AvailabilityRepository":
        """Create repository for availability rule reads."""
        from .availability_repository import AvailabilityRepository

        return AvailabilityRepository(db)

    @staticmethod
    def create_lesson_repository(db: Session) -> "LessonRepository":
        """Create repository for lesson reads and guarded inserts."""
        from .lesson_repository import LessonRepository

        return LessonRepository(db)

    @staticmethod
    def create_learner_repository(db: Session) -> "LearnerRepository":
        from .learner_repository import LearnerRepository

        return LearnerRepository(db)

    @staticmethod
    def create_teacher_repository(db: Session) -> "TeacherRepository":
        from .teacher_repository import TeacherRepository

        return TeacherRepository(db)
