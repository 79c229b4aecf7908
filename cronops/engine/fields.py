"""
Cron field model.

A five-field cron expression is parsed once into a tuple of CronField
variants. Matching and description rendering dispatch on the variant
instead of re-reading the raw token.

Field positions (index, name, domain):
    0 minute        0-59
    1 hour          0-23
    2 day-of-month  1-31
    3 month         1-12
    4 day-of-week   0-7   (0 and 7 are both Sunday)
"""

import calendar
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Optional, Tuple, Union


class FieldPosition(IntEnum):
    """Position of a field inside a five-field expression."""

    MINUTE = 0
    HOUR = 1
    DAY_OF_MONTH = 2
    MONTH = 3
    DAY_OF_WEEK = 4


@dataclass(frozen=True)
class FieldDomain:
    """Inclusive integer bounds legal for one field position."""

    name: str
    min_value: int
    max_value: int

    def contains(self, value: int) -> bool:
        return self.min_value <= value <= self.max_value


FIELD_DOMAINS: Tuple[FieldDomain, ...] = (
    FieldDomain("minute", 0, 59),
    FieldDomain("hour", 0, 23),
    FieldDomain("day-of-month", 1, 31),
    FieldDomain("month", 1, 12),
    FieldDomain("day-of-week", 0, 7),
)


# =============================================================================
# Field Variants
# =============================================================================


@dataclass(frozen=True)
class Wildcard:
    """`*` - every value in the domain."""

    raw: str = field(default="*", compare=False)

    def matches(self, value: int, domain: FieldDomain) -> bool:
        return True

    def to_token(self) -> str:
        return "*"


@dataclass(frozen=True)
class Single:
    """A single integer value."""

    value: int
    raw: str = field(default="", compare=False)

    def matches(self, value: int, domain: FieldDomain) -> bool:
        return value == self.value

    def to_token(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Range:
    """Inclusive range lo-hi, lo <= hi."""

    lo: int
    hi: int
    raw: str = field(default="", compare=False)

    def matches(self, value: int, domain: FieldDomain) -> bool:
        return self.lo <= value <= self.hi

    def to_token(self) -> str:
        return f"{self.lo}-{self.hi}"


@dataclass(frozen=True)
class ValueList:
    """Comma-separated members, each a Single or a Range."""

    members: Tuple[Union[Single, Range], ...]
    raw: str = field(default="", compare=False)

    def matches(self, value: int, domain: FieldDomain) -> bool:
        return any(member.matches(value, domain) for member in self.members)

    def to_token(self) -> str:
        return ",".join(member.to_token() for member in self.members)


@dataclass(frozen=True)
class Step:
    """
    Every `interval`-th value starting at the base.

    The base is either a Wildcard (`*/n`, rooted at the domain minimum)
    or a Range (`lo-hi/n`, rooted at lo).
    """

    base: Union[Wildcard, Range]
    interval: int
    raw: str = field(default="", compare=False)

    def bounds(self, domain: FieldDomain) -> Tuple[int, int]:
        if isinstance(self.base, Range):
            return self.base.lo, self.base.hi
        return domain.min_value, domain.max_value

    def matches(self, value: int, domain: FieldDomain) -> bool:
        start, end = self.bounds(domain)
        if value < start or value > end:
            return False
        return (value - start) % self.interval == 0

    def to_token(self) -> str:
        return f"{self.base.to_token()}/{self.interval}"


@dataclass(frozen=True)
class LastDay:
    """`L` in the day-of-month position - the last day of the month."""

    raw: str = field(default="L", compare=False)

    def matches(self, value: int, domain: FieldDomain) -> bool:
        # Needs the calendar month; see matches_day_of_month().
        return False

    def to_token(self) -> str:
        return "L"


CronField = Union[Wildcard, Single, ValueList, Range, Step, LastDay]


# =============================================================================
# Parsed Schedule
# =============================================================================


@dataclass(frozen=True)
class ParsedSchedule:
    """Five validated fields in fixed order plus the original text."""

    minute: CronField
    hour: CronField
    day_of_month: CronField
    month: CronField
    day_of_week: CronField
    expression: str = field(default="", compare=False)

    @property
    def fields(self) -> Tuple[CronField, ...]:
        return (self.minute, self.hour, self.day_of_month, self.month, self.day_of_week)

    def to_expression(self) -> str:
        """Canonical five-token form; parsing it yields an equal schedule."""
        return " ".join(f.to_token() for f in self.fields)

    def matches_day(self, instant: datetime) -> bool:
        """
        Day selection with the cron OR-rule.

        Both day fields wildcard: any day. One restricted: that field
        governs. Both restricted: day-of-month OR day-of-week.
        """
        dom_any = isinstance(self.day_of_month, Wildcard)
        dow_any = isinstance(self.day_of_week, Wildcard)

        if dom_any and dow_any:
            return True
        if dow_any:
            return matches_day_of_month(self.day_of_month, instant)
        if dom_any:
            return matches_day_of_week(self.day_of_week, instant)
        return (
            matches_day_of_month(self.day_of_month, instant)
            or matches_day_of_week(self.day_of_week, instant)
        )

    def matches(self, instant: datetime) -> bool:
        """Whether the schedule fires at this instant (minute resolution)."""
        return (
            self.minute.matches(instant.minute, FIELD_DOMAINS[FieldPosition.MINUTE])
            and self.hour.matches(instant.hour, FIELD_DOMAINS[FieldPosition.HOUR])
            and self.month.matches(instant.month, FIELD_DOMAINS[FieldPosition.MONTH])
            and self.matches_day(instant)
        )

    def __str__(self) -> str:
        return self.expression or self.to_expression()


def cron_weekday(instant: datetime) -> int:
    """Weekday number in cron convention (Sunday=0 ... Saturday=6)."""
    return instant.isoweekday() % 7


def matches_day_of_month(cron_field: CronField, instant: datetime) -> bool:
    if isinstance(cron_field, LastDay):
        return instant.day == calendar.monthrange(instant.year, instant.month)[1]
    return cron_field.matches(instant.day, FIELD_DOMAINS[FieldPosition.DAY_OF_MONTH])


def matches_day_of_week(cron_field: CronField, instant: datetime) -> bool:
    domain = FIELD_DOMAINS[FieldPosition.DAY_OF_WEEK]
    weekday = cron_weekday(instant)
    if cron_field.matches(weekday, domain):
        return True
    # Sunday is also 7 (ranges such as 5-7 keep the upper bound).
    return weekday == 0 and cron_field.matches(7, domain)


def single_value(cron_field: CronField) -> Optional[int]:
    """The integer of a Single field, None for any other variant."""
    if isinstance(cron_field, Single):
        return cron_field.value
    return None
