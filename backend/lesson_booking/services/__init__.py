"""
Service layer for the lesson booking service.

All business logic lives here; routes only translate HTTP to service calls.
"""

from .availability_service import AvailabilityService
from .base import BaseService
from .booking_service import BookingService
from .booking_wizard import BookingWizard, WizardStep
from .conflict_checker import ConflictChecker
from .learner_service import LearnerService
from .pricing_service import PricingService

__all__ = [
    "AvailabilityService",
    "BaseService",
    "BookingService",
    "BookingWizard",
    "ConflictChecker",
    "LearnerService",
    "PricingService",
    "WizardStep",
]
