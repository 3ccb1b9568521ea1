"""
Typed availability rules decoded once at the data boundary.

Stored availability arrives as loosely-typed rows (ORM objects or mappings
from an external source). They are decoded into three frozen rule kinds
so resolution code never inspects raw rows:

- RecurringRule: weekly window keyed by day of week (0 = Sunday)
- OneOffRule: a single date's exception to the weekly pattern
- BlockedRule: a date on which no slot may be offered
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from functools import cached_property
from typing import Any, ClassVar, Dict, FrozenSet, Iterable, List, Mapping, Tuple, Union

from ..core.exceptions import AvailabilityDataException


def normalize_time_of_day(value: Any) -> time:
    """
    Normalize a stored time to minute precision.

    Accepts ``time``/``datetime`` objects and "HH:MM", "HH:MM:SS" or
    "HH:MM:SS.ffffff" strings. Seconds are always truncated, never rounded.
    """
    if isinstance(value, datetime):
        value = value.time()
    if isinstance(value, time):
        return time(value.hour, value.minute)
    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2 or len(parts) > 3:
            raise ValueError(f"Invalid time of day: {value!r}")
        hour, minute = int(parts[0]), int(parts[1])
        if len(parts) == 3:
            float(parts[2])  # validate only; seconds are dropped
        if hour == 24 and minute == 0:
            # end-of-day sentinel
            return time(0, 0)
        return time(hour, minute)
    raise ValueError(f"Unsupported time value: {value!r}")


def day_of_week(day: date) -> int:
    """Day-of-week index used by stored rules: 0 = Sunday ... 6 = Saturday."""
    return (day.weekday() + 1) % 7


def format_date_key(day: date) -> str:
    """Calendar date formatted as yyyy-MM-dd."""
    return day.strftime("%Y-%m-%d")


def _coerce_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise ValueError(f"Unsupported date value: {value!r}")


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "t", "yes"}
    return bool(value)


def _field(row: Any, name: str) -> Any:
    if isinstance(row, Mapping):
        if name not in row:
            raise KeyError(name)
        return row[name]
    if not hasattr(row, name):
        raise KeyError(name)
    return getattr(row, name)


@dataclass(frozen=True)
class RecurringRule:
    kind: ClassVar[str] = "recurring"

    teacher_id: str
    day_of_week: int
    start_time: time
    end_time: time
    is_available: bool


@dataclass(frozen=True)
class OneOffRule:
    kind: ClassVar[str] = "one_off"

    teacher_id: str
    date: date
    start_time: time
    end_time: time
    is_available: bool


@dataclass(frozen=True)
class BlockedRule:
    kind: ClassVar[str] = "blocked"

    teacher_id: str
    date: date


AvailabilityRule = Union[RecurringRule, OneOffRule, BlockedRule]


def decode_recurring(row: Any) -> RecurringRule:
    try:
        dow = int(_field(row, "day_of_week"))
        if not 0 <= dow <= 6:
            raise ValueError(f"day_of_week out of range: {dow}")
        return RecurringRule(
            teacher_id=str(_field(row, "teacher_id")),
            day_of_week=dow,
            start_time=normalize_time_of_day(_field(row, "start_time")),
            end_time=normalize_time_of_day(_field(row, "end_time")),
            is_available=_coerce_bool(_field(row, "is_available")),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise AvailabilityDataException(
            f"Malformed recurring availability row: {exc}", details={"kind": "recurring"}
        ) from exc


def decode_one_off(row: Any) -> OneOffRule:
    try:
        return OneOffRule(
            teacher_id=str(_field(row, "teacher_id")),
            date=_coerce_date(_field(row, "date")),
            start_time=normalize_time_of_day(_field(row, "start_time")),
            end_time=normalize_time_of_day(_field(row, "end_time")),
            is_available=_coerce_bool(_field(row, "is_available")),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise AvailabilityDataException(
            f"Malformed one-off availability row: {exc}", details={"kind": "one_off"}
        ) from exc


def decode_blocked(row: Any) -> BlockedRule:
    try:
        return BlockedRule(
            teacher_id=str(_field(row, "teacher_id")),
            date=_coerce_date(_field(row, "date")),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise AvailabilityDataException(
            f"Malformed blocked date row: {exc}", details={"kind": "blocked"}
        ) from exc


_DECODERS = {
    RecurringRule.kind: decode_recurring,
    OneOffRule.kind: decode_one_off,
    BlockedRule.kind: decode_blocked,
}


def decode_rule(kind: str, row: Any) -> AvailabilityRule:
    """Decode one raw row of the given kind into its typed rule."""
    decoder = _DECODERS.get(kind)
    if decoder is None:
        raise AvailabilityDataException(f"Unknown availability rule kind: {kind!r}")
    return decoder(row)


@dataclass(frozen=True)
class TeacherRuleSet:
    """All availability rules of one teacher, already decoded."""

    teacher_id: str
    recurring: Tuple[RecurringRule, ...] = ()
    overrides: Tuple[OneOffRule, ...] = ()
    blocked: Tuple[BlockedRule, ...] = ()

    @classmethod
    def from_rules(cls, teacher_id: str, rules: Iterable[AvailabilityRule]) -> "TeacherRuleSet":
        recurring: List[RecurringRule] = []
        overrides: List[OneOffRule] = []
        blocked: List[BlockedRule] = []
        for rule in rules:
            if isinstance(rule, RecurringRule):
                recurring.append(rule)
            elif isinstance(rule, OneOffRule):
                overrides.append(rule)
            elif isinstance(rule, BlockedRule):
                blocked.append(rule)
            else:
                raise AvailabilityDataException(f"Unsupported rule type: {type(rule).__name__}")
        return cls(
            teacher_id=teacher_id,
            recurring=tuple(recurring),
            overrides=tuple(overrides),
            blocked=tuple(blocked),
        )

    @classmethod
    def from_rows(
        cls,
        teacher_id: str,
        *,
        recurring_rows: Iterable[Any] = (),
        override_rows: Iterable[Any] = (),
        blocked_rows: Iterable[Any] = (),
    ) -> "TeacherRuleSet":
        rules: List[AvailabilityRule] = []
        rules.extend(decode_recurring(row) for row in recurring_rows)
        rules.extend(decode_one_off(row) for row in override_rows)
        rules.extend(decode_blocked(row) for row in blocked_rows)
        return cls.from_rules(teacher_id, rules)

    @cached_property
    def recurring_by_day(self) -> Dict[int, Tuple[RecurringRule, ...]]:
        index: Dict[int, List[RecurringRule]] = {}
        for rule in self.recurring:
            index.setdefault(rule.day_of_week, []).append(rule)
        return {day: tuple(sorted(rules, key=lambda r: r.start_time)) for day, rules in index.items()}

    @cached_property
    def overrides_by_date(self) -> Dict[date, Tuple[OneOffRule, ...]]:
        index: Dict[date, List[OneOffRule]] = {}
        for rule in self.overrides:
            index.setdefault(rule.date, []).append(rule)
        return {day: tuple(rules) for day, rules in index.items()}

    @cached_property
    def blocked_dates(self) -> FrozenSet[str]:
        return frozenset(
            format_date_key(rule.date) for rule in self.blocked if rule.teacher_id == self.teacher_id
        )
