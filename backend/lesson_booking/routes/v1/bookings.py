# backend/lesson_booking/routes/v1/bookings.py
"""
Booking routes - API v1

All business logic delegated to BookingService.

Endpoints:
    POST / - Commit a booking for a chosen slot
    GET /{lesson_id} - Lesson details
    POST /{lesson_id}/cancel - Cancel a lesson
"""

import logging
from typing import NoReturn

from fastapi import APIRouter, Body, Depends, HTTPException, status

from ...api.dependencies import get_booking_service
from ...core.exceptions import DomainException
from ...schemas.booking import BookingCancel, BookingCreate, LessonResponse
from ...services.booking_service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookings"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.post(
    "",
    response_model=LessonResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "incomplete_request"},
        409: {"description": "slot_unavailable"},
        500: {"description": "persistence_error"},
    },
)
def create_booking(
    booking_data: BookingCreate = Body(...),
    booking_service: BookingService = Depends(get_booking_service),
) -> LessonResponse:
    """
    Book a lesson.

    A 409 means the slot was taken or closed since it was shown; fetch
    availability again and let the student pick another time.
    """
    try:
        lesson = booking_service.commit_booking(booking_data)
    except DomainException as e:
        handle_domain_exception(e)
    return LessonResponse.model_validate(lesson)


@router.get("/{lesson_id}", response_model=LessonResponse)
def get_booking(
    lesson_id: str,
    booking_service: BookingService = Depends(get_booking_service),
) -> LessonResponse:
    try:
        lesson = booking_service.get_lesson(lesson_id)
    except DomainException as e:
        handle_domain_exception(e)
    return LessonResponse.model_validate(lesson)


@router.post("/{lesson_id}/cancel", response_model=LessonResponse)
def cancel_booking(
    lesson_id: str,
    cancel_data: BookingCancel = Body(...),
    booking_service: BookingService = Depends(get_booking_service),
) -> LessonResponse:
    """Cancel a lesson; its time becomes bookable again."""
    try:
        lesson = booking_service.cancel_booking(
            lesson_id, cancel_data.cancelled_by, cancel_data.reason
        )
    except DomainException as e:
        handle_domain_exception(e)
    return LessonResponse.model_validate(lesson)
