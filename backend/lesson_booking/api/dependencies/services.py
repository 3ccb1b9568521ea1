# backend/lesson_booking/api/dependencies/services.py
"""
Service dependencies for FastAPI.

Every service receives the request's database session and the clock
returned by ``get_clock``; tests override ``get_clock`` to pin "now".
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...core.clock import Clock, system_clock
from ...services.availability_service import AvailabilityService
from ...services.booking_service import BookingService
from ...services.learner_service import LearnerService
from .database import get_db


def get_clock() -> Clock:
    return system_clock


def get_availability_service(
    db: Session = Depends(get_db), clock: Clock = Depends(get_clock)
) -> AvailabilityService:
    return AvailabilityService(db, clock)


def get_booking_service(
    db: Session = Depends(get_db), clock: Clock = Depends(get_clock)
) -> BookingService:
    """
    Get booking service instance with all dependencies.

    Args:
        db: Database session
        clock: Source of "now" for lead-time checks

    Returns:
        BookingService instance
    """
    return BookingService(db, clock)


def get_learner_service(
    db: Session = Depends(get_db), clock: Clock = Depends(get_clock)
) -> LearnerService:
    return LearnerService(db, clock)
