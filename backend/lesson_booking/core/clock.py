"""
Clock utilities for the lesson booking service.

All scheduling runs in one implicit wall-clock zone, so "now" is a naive
datetime. Services receive a clock callable instead of reading the system
time directly, which keeps availability resolution deterministic in tests.
"""

from datetime import date, datetime
from typing import Callable

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    """Current wall-clock time, truncated to whole seconds."""
    return datetime.now().replace(microsecond=0)


def fixed_clock(moment: datetime) -> Clock:
    """Return a clock that always reports ``moment``."""

    def _now() -> datetime:
        return moment

    return _now


def today(clock: Clock = system_clock) -> date:
    """Get 'today' according to ``clock``."""
    return clock().date()
