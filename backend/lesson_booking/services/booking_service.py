# backend/lesson_booking/services/booking_service.py
"""
Booking Service for the lesson booking service.

Commits a learner's chosen slot as a lesson. A commit either creates
exactly one lesson or creates nothing:

- incomplete_request: a learner, teacher, subject, time or supported duration is missing,
  or the teacher does not teach the subject
- slot_unavailable: the slot is no longer bookable, including losing a race to
  another commit; callers re-resolve availability, nothing is retried here
- persistence_error: any other storage failure, reported with the driver's message

The overlap check is repeated inside the write itself (conditional insert,
plus an exclusion constraint on PostgreSQL), so the availability re-check
before it is an early answer, not the guarantee. A learner has at most one
free-trial lesson (unique index); a commit that loses the trial to a
concurrent one is written again at list price.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.clock import Clock, system_clock
from ..core.config import settings
from ..core.enums import CancelledBy
from ..core.exceptions import (
    INCOMPLETE_REQUEST,
    PERSISTENCE_ERROR,
    SLOT_UNAVAILABLE,
    BookingPersistenceException,
    BusinessRuleException,
    IncompleteBookingException,
    NotFoundException,
    RepositoryException,
    SlotUnavailableException,
    ValidationException,
)
from ..models.lesson import FREE_TRIAL_INDEX_NAME, OVERLAP_CONSTRAINT_NAME, Lesson
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from ..repositories.learner_repository import LearnerRepository
from ..repositories.lesson_repository import LessonRepository
from ..schemas.booking import BookingCreate
from .availability_service import AvailabilityService
from .base import BaseService
from .pricing_service import SUBJECT_DISABLED, LessonQuote, PricingService, quote_lesson

logger = logging.getLogger(__name__)

BOOKING_CREATED = "created"

_SQLITE_TRIAL_VIOLATION = "UNIQUE constraint failed: lessons.learner_id"


class BookingService(BaseService):
    """Commits and cancels lessons."""

    def __init__(
        self,
        db: Session,
        clock: Clock = system_clock,
        availability_service: Optional[AvailabilityService] = None,
        pricing_service: Optional[PricingService] = None,
        lesson_repository: Optional[LessonRepository] = None,
        learner_repository: Optional[LearnerRepository] = None,
    ):
        super().__init__(db, clock)
        self.availability_service = availability_service or AvailabilityService(db, clock)
        self.pricing_service = pricing_service or PricingService(db, clock)
        self.repository = lesson_repository or RepositoryFactory.create_lesson_repository(db)
        self.learner_repository = (
            learner_repository or RepositoryFactory.create_learner_repository(db)
        )

    @staticmethod
    def _violated_constraint(integrity_error: IntegrityError) -> str:
        """Name of the lesson constraint behind an IntegrityError, or ""."""
        orig = getattr(integrity_error, "orig", None)
        diag = getattr(orig, "diag", None)

        if diag is not None:
            constraint_name = getattr(diag, "constraint_name", "") or ""
            if constraint_name:
                return constraint_name

        message = str(orig) if orig is not None else ""
        if OVERLAP_CONSTRAINT_NAME in message:
            return OVERLAP_CONSTRAINT_NAME
        # SQLite reports unique index violations by column, not by index name.
        if FREE_TRIAL_INDEX_NAME in message or _SQLITE_TRIAL_VIOLATION in message:
            return FREE_TRIAL_INDEX_NAME
        return ""

    @classmethod
    def _is_overlap_violation(cls, integrity_error: IntegrityError) -> bool:
        return cls._violated_constraint(integrity_error) == OVERLAP_CONSTRAINT_NAME

    @classmethod
    def _is_free_trial_violation(cls, integrity_error: IntegrityError) -> bool:
        return cls._violated_constraint(integrity_error) == FREE_TRIAL_INDEX_NAME

    def _validate_request(self, request: BookingCreate) -> None:
        missing = request.missing_fields()
        if missing:
            raise IncompleteBookingException(missing=missing)

        if request.duration_minutes not in settings.allowed_durations:
            raise IncompleteBookingException(
                f"Please choose a lesson length of "
                f"{' or '.join(str(d) for d in settings.allowed_durations)} minutes",
                missing=["duration_minutes"],
            )

        if self.learner_repository.get_by_id(request.learner_id) is None:
            raise IncompleteBookingException(
                "Please choose a learner for this lesson", missing=["learner_id"]
            )

    def _conflict_details(self, request: BookingCreate, **extra: Any) -> Dict[str, Any]:
        return {
            "teacher_id": request.teacher_id,
            "scheduled_time": request.scheduled_time.isoformat(),
            "duration_minutes": request.duration_minutes,
            **extra,
        }

    @BaseService.measure_operation("commit_booking")
    def commit_booking(self, request: BookingCreate) -> Lesson:
        """
        Create a lesson for the chosen slot.

        Args:
            request: Learner, teacher, subject, start and duration of the lesson

        Returns:
            The created lesson with status ``booked``

        Raises:
            IncompleteBookingException: Missing or unsupported booking details
            SlotUnavailableException: The slot is closed, too soon, blocked or already taken
            BookingPersistenceException: Any other storage failure
        """
        self.log_operation(
            "commit_booking",
            teacher_id=request.teacher_id,
            learner_id=request.learner_id,
            scheduled_time=str(request.scheduled_time),
            duration_minutes=request.duration_minutes,
        )
        try:
            lesson = self._commit(request)
        except IncompleteBookingException:
            self.db.rollback()
            prometheus_metrics.record_booking_commit(INCOMPLETE_REQUEST)
            raise
        except SlotUnavailableException:
            self.db.rollback()
            prometheus_metrics.record_booking_commit(SLOT_UNAVAILABLE)
            raise
        except BookingPersistenceException:
            self.db.rollback()
            prometheus_metrics.record_booking_commit(PERSISTENCE_ERROR)
            raise
        except RepositoryException as exc:
            self.db.rollback()
            prometheus_metrics.record_booking_commit(PERSISTENCE_ERROR)
            raise BookingPersistenceException(str(exc)) from exc
        except Exception:
            self.db.rollback()
            raise

        prometheus_metrics.record_booking_commit(BOOKING_CREATED)
        self.logger.info(
            "Lesson %s booked: teacher=%s learner=%s at %s (%d min, trial=%s, price=%s)",
            lesson.id,
            lesson.teacher_id,
            lesson.learner_id,
            lesson.scheduled_time,
            lesson.duration_minutes,
            lesson.is_free_trial,
            lesson.price_charged,
        )
        return lesson

    def _commit(self, request: BookingCreate) -> Lesson:
        self._validate_request(request)

        try:
            hourly_rate = self.pricing_service.resolve_hourly_rate(
                request.teacher_id, request.subject_id
            )
        except NotFoundException as exc:
            field = "subject_id" if exc.code == "subject_not_found" else "teacher_id"
            raise IncompleteBookingException(exc.message, missing=[field]) from exc
        except ValidationException as exc:
            if exc.code != SUBJECT_DISABLED:
                raise
            raise IncompleteBookingException(exc.message, missing=["subject_id"]) from exc

        self.availability_service.ensure_slot_bookable(
            request.teacher_id, request.scheduled_time, request.duration_minutes
        )
        is_free_trial = not self.repository.has_free_trial_lesson(request.learner_id)
        quote = quote_lesson(hourly_rate, request.duration_minutes, is_free_trial=is_free_trial)

        lesson = self._insert(request, quote)
        if lesson is None:
            self.logger.info(
                "Learner %s used the free trial in a concurrent booking; charging list price",
                request.learner_id,
            )
            quote = quote_lesson(hourly_rate, request.duration_minutes, is_free_trial=False)
            lesson = self._insert(request, quote)
        return lesson

    def _insert(self, request: BookingCreate, quote: LessonQuote) -> Optional[Lesson]:
        """
        Write and commit the lesson.

        Returns None only when a free-trial quote lost the learner's single
        trial to another commit; the caller re-quotes at list price.
        """
        try:
            lesson = self.repository.create_if_no_overlap(
                teacher_id=request.teacher_id,
                learner_id=request.learner_id,
                parent_id=request.parent_id,
                subject_id=request.subject_id,
                scheduled_time=request.scheduled_time,
                duration_minutes=request.duration_minutes,
                price_charged=quote.price_charged,
                is_free_trial=quote.is_free_trial,
                teacher_rate_at_booking=quote.hourly_rate,
            )
            if lesson is None:
                raise SlotUnavailableException(
                    details=self._conflict_details(request, reason="conflict")
                )
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if self._is_overlap_violation(exc):
                self.logger.warning(
                    "Overlap constraint rejected lesson for teacher %s at %s",
                    request.teacher_id,
                    request.scheduled_time,
                )
                raise SlotUnavailableException(
                    details=self._conflict_details(request, reason="conflict")
                ) from exc
            if quote.is_free_trial and self._is_free_trial_violation(exc):
                return None
            self.logger.error("Lesson insert violated a constraint: %s", exc)
            raise BookingPersistenceException(str(exc.orig or exc)) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.logger.error("Lesson insert failed: %s", exc)
            raise BookingPersistenceException(str(getattr(exc, "orig", None) or exc)) from exc

        return lesson

    @BaseService.measure_operation("cancel_booking")
    def cancel_booking(
        self, lesson_id: str, cancelled_by: CancelledBy, reason: Optional[str] = None
    ) -> Lesson:
        """
        Cancel a lesson, releasing its interval for new bookings.

        Raises:
            NotFoundException: No such lesson
            BusinessRuleException: The lesson is already cancelled
        """
        lesson = self.repository.get_by_id(lesson_id)
        if lesson is None:
            raise NotFoundException(f"Lesson {lesson_id} not found", code="lesson_not_found")
        if lesson.is_cancelled:
            raise BusinessRuleException(
                f"Lesson {lesson_id} is already cancelled", code="already_cancelled"
            )

        with self.transaction():
            lesson.cancel(cancelled_by.lesson_status, self.clock(), reason)

        self.log_operation("cancel_booking", lesson_id=lesson_id, cancelled_by=cancelled_by.value)
        return lesson

    def get_lesson(self, lesson_id: str) -> Lesson:
        lesson = self.repository.get_by_id(lesson_id)
        if lesson is None:
            raise NotFoundException(f"Lesson {lesson_id} not found", code="lesson_not_found")
        return lesson
