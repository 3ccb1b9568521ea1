"""Tests for lead-time and blocked-date filtering."""

from datetime import date, datetime, time

from lesson_booking.domain.booking_window import (
    BLOCKED_DATE,
    IN_PAST,
    INSUFFICIENT_NOTICE,
    booking_window_rejection,
    meets_minimum_notice,
    normalize_blocked_dates,
    passes_booking_window,
)

NOW = datetime(2024, 1, 1, 10, 0)
MONDAY = date(2024, 1, 1)


class TestLeadTime:
    def test_slot_inside_two_hours_is_rejected(self):
        assert not passes_booking_window(MONDAY, time(11, 30), NOW, frozenset())

    def test_slot_after_two_hours_is_accepted(self):
        assert passes_booking_window(MONDAY, time(12, 1), NOW, frozenset())
        assert passes_booking_window(MONDAY, time(12, 30), NOW, frozenset())

    def test_exactly_two_hours_is_accepted(self):
        assert meets_minimum_notice(datetime(2024, 1, 1, 12, 0), NOW)
        assert passes_booking_window(MONDAY, time(12, 0), NOW, frozenset())

    def test_past_and_present_slots_are_rejected(self):
        assert not passes_booking_window(MONDAY, time(9, 0), NOW, frozenset())
        assert not passes_booking_window(MONDAY, time(10, 0), NOW, frozenset())
        assert not passes_booking_window(MONDAY, time(10, 0), NOW, frozenset(), min_notice_hours=0)


class TestBlockedDates:
    def test_blocked_date_rejects_every_slot(self):
        blocked = normalize_blocked_dates([date(2024, 1, 2)])
        tuesday = date(2024, 1, 2)

        assert not passes_booking_window(tuesday, time(15, 0), NOW, blocked)
        assert passes_booking_window(date(2024, 1, 3), time(15, 0), NOW, blocked)

    def test_normalizes_strings_and_dates(self):
        assert normalize_blocked_dates(["2024-01-02", date(2024, 1, 3), "2024-01-04T00:00:00"]) == {
            "2024-01-02",
            "2024-01-03",
            "2024-01-04",
        }


class TestRejectionReason:
    def test_first_failed_check_is_reported(self):
        blocked = normalize_blocked_dates([MONDAY])

        assert booking_window_rejection(MONDAY, time(9, 0), NOW, blocked) == IN_PAST
        assert booking_window_rejection(MONDAY, time(11, 0), NOW, blocked) == INSUFFICIENT_NOTICE
        assert booking_window_rejection(MONDAY, time(15, 0), NOW, blocked) == BLOCKED_DATE

    def test_open_start_has_no_reason(self):
        assert booking_window_rejection(MONDAY, time(15, 0), NOW, frozenset()) is None
