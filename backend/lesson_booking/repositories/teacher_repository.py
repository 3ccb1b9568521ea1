# backend/lesson_booking/repositories/teacher_repository.py
"""
Teacher Repository for the lesson booking service.

Reads the pricing inputs of a booking: the teacher profile, the subject
and the teacher's per-subject rate.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.teacher import Subject, TeacherProfile, TeacherSubjectRate
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class TeacherRepository(BaseRepository[TeacherProfile]):
    """Repository for teacher profiles, subjects and subject rates."""

    def __init__(self, db: Session):
        super().__init__(db, TeacherProfile)

    def get_subject(self, subject_id: str) -> Optional[Subject]:
        try:
            return self.db.query(Subject).filter(Subject.id == subject_id).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting subject {subject_id}: {str(e)}")
            raise RepositoryException(f"Failed to get subject: {str(e)}")

    def get_subject_rate(self, teacher_id: str, subject_id: str) -> Optional[TeacherSubjectRate]:
        try:
            return (
                self.db.query(TeacherSubjectRate)
                .filter(
                    TeacherSubjectRate.teacher_id == teacher_id,
                    TeacherSubjectRate.subject_id == subject_id,
                )
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error getting rate for teacher {teacher_id} subject {subject_id}: {str(e)}"
            )
            raise RepositoryException(f"Failed to get subject rate: {str(e)}")
