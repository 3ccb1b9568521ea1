# backend/lesson_booking/repositories/availability_repository.py
"""
Availability Repository for the lesson booking service.

Reads a teacher's recurring rules, one-off overrides and blocked dates
for a bounded window. Rows are returned as stored; decoding into typed
rules happens in the service layer.
"""

from datetime import date
import logging
from typing import List, Optional

from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.availability import BlockedDate, OneOffAvailability, RecurringAvailability
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class AvailabilityRepository(BaseRepository[RecurringAvailability]):
    """Repository for teacher availability rules."""

    def __init__(self, db: Session):
        super().__init__(db, RecurringAvailability)

    def get_recurring_rules(self, teacher_id: str) -> List[RecurringAvailability]:
        try:
            return (
                self.db.query(RecurringAvailability)
                .filter(RecurringAvailability.teacher_id == teacher_id)
                .order_by(RecurringAvailability.day_of_week, RecurringAvailability.start_time)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting recurring availability: {str(e)}")
            raise RepositoryException(f"Failed to get recurring availability: {str(e)}")

    def get_one_off_overrides(
        self, teacher_id: str, start_date: date, end_date: date
    ) -> List[OneOffAvailability]:
        """Overrides for dates in the inclusive range [start_date, end_date]."""
        try:
            return (
                self.db.query(OneOffAvailability)
                .filter(
                    and_(
                        OneOffAvailability.teacher_id == teacher_id,
                        OneOffAvailability.date >= start_date,
                        OneOffAvailability.date <= end_date,
                    )
                )
                .order_by(OneOffAvailability.date, OneOffAvailability.start_time)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting one-off availability: {str(e)}")
            raise RepositoryException(f"Failed to get one-off availability: {str(e)}")

    def get_blocked_dates(
        self, teacher_id: str, start_date: date, end_date: date
    ) -> List[BlockedDate]:
        try:
            return (
                self.db.query(BlockedDate)
                .filter(
                    and_(
                        BlockedDate.teacher_id == teacher_id,
                        BlockedDate.date >= start_date,
                        BlockedDate.date <= end_date,
                    )
                )
                .order_by(BlockedDate.date)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting blocked dates: {str(e)}")
            raise RepositoryException(f"Failed to get blocked dates: {str(e)}")

    def create_blocked_date(
        self, teacher_id: str, blocked_date: date, reason: Optional[str] = None
    ) -> BlockedDate:
        """
        Create a new blocked date.

        Raises:
            RepositoryException: If the date is already blocked or creation fails
        """
        try:
            blocked = BlockedDate(teacher_id=teacher_id, date=blocked_date, reason=reason)
            self.db.add(blocked)
            self.db.flush()
            return blocked
        except IntegrityError as e:
            self.logger.error(f"Integrity error creating blocked date: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Blocked date already exists: {str(e)}")
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating blocked date: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to create blocked date: {str(e)}")
