# backend/lesson_booking/services/learner_service.py
"""
Learner Service for the lesson booking service.

A parent account books lessons for its learners. An account with no
learner gets a default one the first time it starts a booking.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.clock import Clock, system_clock
from ..core.constants import MAX_NAME_LENGTH
from ..core.exceptions import NotFoundException, ValidationException
from ..models.learner import Learner
from ..repositories.factory import RepositoryFactory
from ..repositories.learner_repository import LearnerRepository
from ..repositories.lesson_repository import LessonRepository
from .base import BaseService

logger = logging.getLogger(__name__)

DEFAULT_LEARNER_NAME = "Student"


class LearnerService(BaseService):
    def __init__(
        self,
        db: Session,
        clock: Clock = system_clock,
        repository: Optional[LearnerRepository] = None,
        lesson_repository: Optional[LessonRepository] = None,
    ):
        super().__init__(db, clock)
        self.repository = repository or RepositoryFactory.create_learner_repository(db)
        self.lesson_repository = lesson_repository or RepositoryFactory.create_lesson_repository(db)

    @BaseService.measure_operation("ensure_learner")
    def ensure_learner(self, parent_id: str, name: Optional[str] = None) -> List[Learner]:
        """
        Return the account's learners, creating a default learner if there are none.
        """
        if not parent_id:
            raise ValidationException("parent_id is required", code="missing_parent")

        learners = self.repository.list_for_parent(parent_id)
        if learners:
            return learners

        learner_name = (name or "").strip()[:MAX_NAME_LENGTH] or DEFAULT_LEARNER_NAME
        with self.transaction():
            learner = self.repository.create(parent_id=parent_id, name=learner_name)

        self.log_operation("ensure_learner", parent_id=parent_id, learner_id=learner.id)
        return [learner]

    def has_used_free_trial(self, learner_id: str) -> bool:
        """Derived from lesson history: any lesson flagged as a free trial."""
        if self.repository.get_by_id(learner_id) is None:
            raise NotFoundException(f"Learner {learner_id} not found", code="learner_not_found")
        return self.lesson_repository.has_free_trial_lesson(learner_id)
