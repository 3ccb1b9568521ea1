# backend/lesson_booking/services/booking_wizard.py
"""
Booking wizard: the caller-side flow around a booking commit.

    SELECT_LEARNER -> SELECT_SLOT -> CONFIRM -> COMMITTED
                 (back from any open step)  -> ABANDONED

A lost slot sends the wizard back to SELECT_SLOT with the slot cleared so
the caller re-resolves availability. Incomplete details keep it where it is.
"""

from datetime import datetime
from enum import Enum
import logging
from typing import Callable, Optional

from ..core.exceptions import BusinessRuleException, SlotUnavailableException
from ..models.lesson import Lesson
from ..schemas.booking import BookingCreate

logger = logging.getLogger(__name__)


class WizardStep(str, Enum):
    SELECT_LEARNER = "select_learner"
    SELECT_SLOT = "select_slot"
    CONFIRM = "confirm"
    COMMITTED = "committed"
    ABANDONED = "abandoned"


TERMINAL_STEPS = frozenset({WizardStep.COMMITTED, WizardStep.ABANDONED})

_PREVIOUS_STEP = {
    WizardStep.SELECT_SLOT: WizardStep.SELECT_LEARNER,
    WizardStep.CONFIRM: WizardStep.SELECT_SLOT,
}


class WizardTransitionError(BusinessRuleException):
    """Raised when an action is not allowed at the wizard's current step."""

    def __init__(self, step: WizardStep, action: str):
        super().__init__(
            f"Cannot {action} while the booking is at step '{step.value}'",
            code="invalid_wizard_transition",
            details={"step": step.value, "action": action},
        )


class BookingWizard:
    """Collects a learner and a slot, then commits once."""

    def __init__(
        self,
        commit: Callable[[BookingCreate], Lesson],
        *,
        teacher_id: str,
        subject_id: str,
        parent_id: Optional[str] = None,
    ):
        self._commit = commit
        self.teacher_id = teacher_id
        self.subject_id = subject_id
        self.parent_id = parent_id

        self.step = WizardStep.SELECT_LEARNER
        self.learner_id: Optional[str] = None
        self.scheduled_time: Optional[datetime] = None
        self.duration_minutes: Optional[int] = None
        self.lesson: Optional[Lesson] = None

    @property
    def is_finished(self) -> bool:
        return self.step in TERMINAL_STEPS

    def _require(self, action: str, *allowed: WizardStep) -> None:
        if self.step not in allowed:
            raise WizardTransitionError(self.step, action)

    def select_learner(self, learner_id: str) -> WizardStep:
        self._require("select a learner", WizardStep.SELECT_LEARNER)
        self.learner_id = learner_id
        self.step = WizardStep.SELECT_SLOT
        return self.step

    def select_slot(self, scheduled_time: datetime, duration_minutes: int) -> WizardStep:
        self._require("select a slot", WizardStep.SELECT_SLOT)
        self.scheduled_time = scheduled_time
        self.duration_minutes = duration_minutes
        self.step = WizardStep.CONFIRM
        return self.step

    def back(self) -> WizardStep:
        """Step back one screen; on the first screen this is a no-op."""
        if self.is_finished:
            raise WizardTransitionError(self.step, "go back")
        self.step = _PREVIOUS_STEP.get(self.step, self.step)
        if self.step == WizardStep.SELECT_SLOT:
            self._clear_slot()
        return self.step

    def abandon(self) -> WizardStep:
        if self.is_finished:
            raise WizardTransitionError(self.step, "abandon")
        self.step = WizardStep.ABANDONED
        return self.step

    def build_request(self) -> BookingCreate:
        return BookingCreate(
            learner_id=self.learner_id,
            teacher_id=self.teacher_id,
            subject_id=self.subject_id,
            scheduled_time=self.scheduled_time,
            duration_minutes=self.duration_minutes,
            parent_id=self.parent_id,
        )

    def confirm(self) -> Lesson:
        """
        Commit the selection.

        Raises:
            SlotUnavailableException: After returning the wizard to SELECT_SLOT
            IncompleteBookingException: The wizard stays at CONFIRM
        """
        self._require("confirm", WizardStep.CONFIRM)
        try:
            lesson = self._commit(self.build_request())
        except SlotUnavailableException:
            logger.info("Slot %s lost before commit, back to slot selection", self.scheduled_time)
            self.step = WizardStep.SELECT_SLOT
            self._clear_slot()
            raise

        self.lesson = lesson
        self.step = WizardStep.COMMITTED
        return lesson

    def _clear_slot(self) -> None:
        self.scheduled_time = None
        self.duration_minutes = None
