# backend/lesson_booking/repositories/learner_repository.py
"""Learner Repository: learners owned by a parent account."""

import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.learner import Learner
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class LearnerRepository(BaseRepository[Learner]):
    def __init__(self, db: Session):
        super().__init__(db, Learner)

    def list_for_parent(self, parent_id: str) -> List[Learner]:
        try:
            return (
                self.db.query(Learner)
                .filter(Learner.parent_id == parent_id)
                .order_by(Learner.created_at, Learner.id)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing learners for parent {parent_id}: {str(e)}")
            raise RepositoryException(f"Failed to list learners: {str(e)}")
