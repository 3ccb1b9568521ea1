# backend/lesson_booking/routes/v1/availability.py
"""
Teacher availability routes - API v1

Endpoints:
    GET /{teacher_id}/availability - 48-slot bookable grid for one date
    GET /{teacher_id}/bookable-slots - Bookable lesson starts over a date range
"""

import datetime as dt
import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...api.dependencies import get_availability_service
from ...core.exceptions import DomainException
from ...schemas.availability import (
    BookableSlotsResponse,
    DayAvailabilityResponse,
    SlotResponse,
)
from ...services.availability_service import AvailabilityService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["availability"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("/{teacher_id}/availability", response_model=DayAvailabilityResponse)
def get_day_availability(
    teacher_id: str,
    day: dt.date = Query(..., alias="date", description="Calendar date (YYYY-MM-DD)"),
    duration: int = Query(60, description="Lesson length in minutes"),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> DayAvailabilityResponse:
    """
    Bookable flag for every 30-minute slot of a date.

    When availability data cannot be read, all slots are closed and
    ``error`` carries the upstream message.
    """
    try:
        result = availability_service.get_day_availability(teacher_id, day, duration)
    except DomainException as e:
        handle_domain_exception(e)

    return DayAvailabilityResponse(
        teacher_id=result.teacher_id,
        date=result.date,
        duration_minutes=result.duration_minutes,
        slots=[SlotResponse(time=slot.time, bookable=slot.bookable) for slot in result.slots],
        error=result.error,
    )


@router.get("/{teacher_id}/bookable-slots", response_model=BookableSlotsResponse)
def list_bookable_slots(
    teacher_id: str,
    start_date: Optional[dt.date] = Query(None),
    end_date: Optional[dt.date] = Query(None),
    duration: int = Query(60, description="Lesson length in minutes"),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> BookableSlotsResponse:
    try:
        listing = availability_service.list_bookable_slots(
            teacher_id, duration, start_date=start_date, end_date=end_date
        )
    except DomainException as e:
        handle_domain_exception(e)

    return BookableSlotsResponse(
        teacher_id=listing.teacher_id,
        start_date=listing.start_date,
        end_date=listing.end_date,
        duration_minutes=listing.duration_minutes,
        starts=listing.starts,
        error=listing.error,
    )
