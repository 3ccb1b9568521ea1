"""Tests for decoding stored availability rows into typed rules."""

from datetime import date, datetime, time

import pytest

from lesson_booking.core.exceptions import AvailabilityDataException
from lesson_booking.domain.availability_rules import (
    BlockedRule,
    OneOffRule,
    RecurringRule,
    TeacherRuleSet,
    day_of_week,
    decode_rule,
    normalize_time_of_day,
)

TEACHER = "01HTEACHER0000000000000000"


class TestNormalizeTimeOfDay:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("09:00", time(9, 0)),
            ("09:30:59", time(9, 30)),
            ("23:30:45.999999", time(23, 30)),
            (time(14, 0, 59), time(14, 0)),
            (datetime(2024, 1, 1, 7, 30, 30), time(7, 30)),
        ],
    )
    def test_truncates_to_minutes(self, raw, expected):
        assert normalize_time_of_day(raw) == expected

    @pytest.mark.parametrize("raw", ["9", "25:00", "ab:cd", "10:00:00:00", 930])
    def test_rejects_garbage(self, raw):
        with pytest.raises(ValueError):
            normalize_time_of_day(raw)


def test_day_of_week_starts_on_sunday():
    assert day_of_week(date(2024, 1, 7)) == 0  # Sunday
    assert day_of_week(date(2024, 1, 1)) == 1  # Monday
    assert day_of_week(date(2024, 1, 6)) == 6  # Saturday


class TestDecodeRule:
    def test_decodes_each_kind_from_mappings(self):
        recurring = decode_rule(
            "recurring",
            {
                "teacher_id": TEACHER,
                "day_of_week": "2",
                "start_time": "09:00:00",
                "end_time": "09:30:00",
                "is_available": "true",
            },
        )
        one_off = decode_rule(
            "one_off",
            {
                "teacher_id": TEACHER,
                "date": "2024-01-02",
                "start_time": "10:00",
                "end_time": "10:30",
                "is_available": False,
            },
        )
        blocked = decode_rule("blocked", {"teacher_id": TEACHER, "date": "2024-01-03T00:00:00"})

        assert recurring == RecurringRule(TEACHER, 2, time(9, 0), time(9, 30), True)
        assert one_off == OneOffRule(TEACHER, date(2024, 1, 2), time(10, 0), time(10, 30), False)
        assert blocked == BlockedRule(TEACHER, date(2024, 1, 3))

    def test_missing_field_is_a_data_error(self):
        with pytest.raises(AvailabilityDataException) as exc_info:
            decode_rule("recurring", {"teacher_id": TEACHER, "day_of_week": 1})
        assert exc_info.value.code == "availability_data_error"

    def test_out_of_range_day_is_a_data_error(self):
        row = {
            "teacher_id": TEACHER,
            "day_of_week": 7,
            "start_time": "09:00",
            "end_time": "09:30",
            "is_available": True,
        }
        with pytest.raises(AvailabilityDataException):
            decode_rule("recurring", row)

    def test_unknown_kind(self):
        with pytest.raises(AvailabilityDataException):
            decode_rule("weekly", {})


class TestTeacherRuleSet:
    def test_indexes_rules_by_day_and_date(self):
        rules = TeacherRuleSet.from_rules(
            TEACHER,
            [
                RecurringRule(TEACHER, 1, time(10, 0), time(10, 30), True),
                RecurringRule(TEACHER, 1, time(9, 0), time(9, 30), True),
                OneOffRule(TEACHER, date(2024, 1, 2), time(9, 0), time(9, 30), False),
                BlockedRule(TEACHER, date(2024, 1, 5)),
            ],
        )

        assert [r.start_time for r in rules.recurring_by_day[1]] == [time(9, 0), time(10, 0)]
        assert len(rules.overrides_by_date[date(2024, 1, 2)]) == 1
        assert rules.blocked_dates == frozenset({"2024-01-05"})

    def test_from_rows_surfaces_decode_errors(self):
        with pytest.raises(AvailabilityDataException):
            TeacherRuleSet.from_rows(TEACHER, blocked_rows=[{"teacher_id": TEACHER}])
