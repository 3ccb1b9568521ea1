"""
Decide whether a grid slot lies inside a teacher's open teaching window.

Precedence is by exact start time: a one-off override whose start time
equals the slot decides that slot on its date, and the weekly pattern is
not consulted for it. Overrides at other start times do not close the rest
of the day, and no interval merging happens between the two tables.
"""

from __future__ import annotations

from datetime import date, time
from typing import List

from .availability_rules import TeacherRuleSet, day_of_week, normalize_time_of_day
from .slot_grid import generate_slot_grid


def resolve_slot_open(rules: TeacherRuleSet, teacher_id: str, day: date, slot_time: time) -> bool:
    """Return True when ``slot_time`` on ``day`` is open for ``teacher_id``."""
    target = normalize_time_of_day(slot_time)

    override_matched = False
    for override in rules.overrides_by_date.get(day, ()):
        if override.teacher_id != teacher_id or override.start_time != target:
            continue
        if override.is_available:
            return True
        override_matched = True
    if override_matched:
        return False

    for rule in rules.recurring_by_day.get(day_of_week(day), ()):
        if (
            rule.teacher_id == teacher_id
            and rule.start_time == target
            and rule.is_available
        ):
            return True
    return False


def resolve_day(rules: TeacherRuleSet, teacher_id: str, day: date) -> List[bool]:
    """Open/closed decision for every grid slot of ``day``."""
    return [resolve_slot_open(rules, teacher_id, day, slot) for slot in generate_slot_grid()]
