# backend/lesson_booking/core/exceptions.py
"""
Domain-specific exceptions for the lesson booking service.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)

INCOMPLETE_REQUEST = "incomplete_request"
SLOT_UNAVAILABLE = "slot_unavailable"
PERSISTENCE_ERROR = "persistence_error"
AVAILABILITY_DATA_ERROR = "availability_data_error"


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when business validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    status_code = HTTP_422_UNPROCESSABLE


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


# Booking commit errors


class IncompleteBookingException(ValidationException):
    """Raised when a booking request is missing a learner, teacher, subject or time."""

    def __init__(self, message: Optional[str] = None, *, missing: Optional[list] = None):
        super().__init__(
            message=message or "Please complete all booking details",
            code=INCOMPLETE_REQUEST,
            details={"missing": missing or []},
        )


class SlotUnavailableException(ConflictException):
    """Raised when the chosen slot is no longer bookable; callers should re-resolve availability."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "This time slot is no longer available. Please choose another time.",
            code=SLOT_UNAVAILABLE,
            details=details or {},
        )


class BookingPersistenceException(ServiceException):
    """Raised when the booking write fails for a reason other than a slot conflict."""

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code=PERSISTENCE_ERROR, details=details or {})


class AvailabilityDataException(ServiceException):
    """Raised when stored availability rows cannot be decoded."""

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code=AVAILABILITY_DATA_ERROR, details=details or {})


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
