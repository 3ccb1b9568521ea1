# backend/lesson_booking/services/pricing_service.py
"""
Pricing for lessons.

The hourly rate a lesson is charged at comes from, in order: the teacher's
rate for the subject, the teacher's profile rate, the subject minimum, and
finally the platform default. A rate below the subject minimum is raised to
it. Half-hour lessons cost half the hourly rate; every other duration costs
the full hourly rate. A learner's first lesson is a free trial.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from ..core.clock import Clock, system_clock
from ..core.config import settings
from ..core.constants import HALF_HOUR_LESSON
from ..core.exceptions import NotFoundException, ValidationException
from ..repositories.factory import RepositoryFactory
from ..repositories.teacher_repository import TeacherRepository
from .base import BaseService

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")
SUBJECT_DISABLED = "subject_disabled"


def quantize_money(value: Any) -> Decimal:
    """Round a monetary amount to cents, half-up."""
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationException(f"Invalid monetary amount: {value!r}") from exc
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def compute_lesson_price(hourly_rate: Any, duration_minutes: int) -> Decimal:
    """30-minute lessons cost half the hourly rate, anything else the full rate."""
    rate = quantize_money(hourly_rate)
    if duration_minutes == HALF_HOUR_LESSON:
        return quantize_money(rate / 2)
    return rate


@dataclass(frozen=True)
class LessonQuote:
    """What a lesson will be charged, decided before the write."""

    hourly_rate: Decimal
    duration_minutes: int
    list_price: Decimal
    is_free_trial: bool

    @property
    def price_charged(self) -> Decimal:
        return ZERO if self.is_free_trial else self.list_price


def quote_lesson(hourly_rate: Any, duration_minutes: int, *, is_free_trial: bool) -> LessonQuote:
    rate = quantize_money(hourly_rate)
    return LessonQuote(
        hourly_rate=rate,
        duration_minutes=duration_minutes,
        list_price=compute_lesson_price(rate, duration_minutes),
        is_free_trial=is_free_trial,
    )


def _positive_or_none(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    amount = quantize_money(value)
    return amount if amount > 0 else None


class PricingService(BaseService):
    """Resolves the hourly rate a teacher charges for a subject."""

    def __init__(
        self,
        db: Session,
        clock: Clock = system_clock,
        teacher_repository: Optional[TeacherRepository] = None,
    ):
        super().__init__(db, clock)
        self.teacher_repository = (
            teacher_repository or RepositoryFactory.create_teacher_repository(db)
        )

    @BaseService.measure_operation("resolve_hourly_rate")
    def resolve_hourly_rate(self, teacher_id: str, subject_id: Optional[str] = None) -> Decimal:
        """
        Resolve the hourly rate for a teacher and subject.

        Raises:
            NotFoundException: Unknown teacher or subject
            ValidationException: The teacher has disabled this subject
        """
        profile = self.teacher_repository.get_by_id(teacher_id)
        if profile is None:
            raise NotFoundException(f"Teacher {teacher_id} not found", code="teacher_not_found")

        subject = None
        subject_rate = None
        if subject_id:
            subject = self.teacher_repository.get_subject(subject_id)
            if subject is None:
                raise NotFoundException(f"Subject {subject_id} not found", code="subject_not_found")
            subject_rate = self.teacher_repository.get_subject_rate(teacher_id, subject_id)
            if subject_rate is not None and not subject_rate.is_enabled:
                raise ValidationException(
                    f"Teacher {teacher_id} does not teach subject {subject_id}",
                    code=SUBJECT_DISABLED,
                )

        minimum = _positive_or_none(subject.minimum_rate) if subject is not None else None

        rate = _positive_or_none(subject_rate.hourly_rate) if subject_rate is not None else None
        if rate is None:
            rate = _positive_or_none(profile.hourly_rate)
        if rate is None:
            rate = minimum
        if rate is None:
            rate = quantize_money(settings.default_hourly_rate)

        if minimum is not None and rate < minimum:
            self.logger.info(
                "Raising rate %s for teacher %s to subject minimum %s", rate, teacher_id, minimum
            )
            rate = minimum

        return rate
