"""
Description generator.

Renders a ParsedSchedule as an English sentence. The function is total:
every validated schedule gets a description, falling back to templated
phrases ("at minute 17", "on day */2 of the week") where no specific
wording exists.

Rendering happens in three tiers:
    1. whole-expression overrides for the most common shapes
    2. one clause per field
    3. conditional concatenation (wildcard day/month clauses are dropped)
"""

from typing import Optional, Union

from .fields import (
    CronField,
    LastDay,
    ParsedSchedule,
    Range,
    Single,
    Step,
    ValueList,
    Wildcard,
    single_value,
)

PREFIX = "This cron expression will run "

MONTH_NAMES = [
    "", "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

WEEKDAY_NAMES = [
    "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday",
]

NAMED_MINUTE_STEPS = {1, 5, 10, 15, 30}

WEEKEND_TOKENS = {"0,6", "6,0", "6,7"}


def _is_wildcard(cron_field: CronField) -> bool:
    return isinstance(cron_field, Wildcard)


def _is_wildcard_step(cron_field: CronField) -> bool:
    return isinstance(cron_field, Step) and isinstance(cron_field.base, Wildcard)


def ordinal_suffix(day: int) -> str:
    """st/nd/rd/th for a day of month. 11, 12 and 13 fall through to th."""
    if day in (1, 21, 31):
        return "st"
    if day in (2, 22):
        return "nd"
    if day in (3, 23):
        return "rd"
    return "th"


def month_name(member: Union[Single, Range]) -> str:
    if isinstance(member, Single) and 1 <= member.value <= 12:
        return MONTH_NAMES[member.value]
    return member.raw


def weekday_name(member: Union[Single, Range]) -> str:
    if isinstance(member, Single):
        return WEEKDAY_NAMES[member.value % 7]
    return member.raw


def _bound_names(cron_field: Range, names: list) -> tuple:
    return names[cron_field.lo % len(names)], names[cron_field.hi % len(names)]


# =============================================================================
# Per-field clauses
# =============================================================================


def describe_minute(cron_field: CronField) -> str:
    if _is_wildcard(cron_field):
        return "every minute"
    if single_value(cron_field) == 0:
        return "at the start of each hour"
    if _is_wildcard_step(cron_field) and cron_field.interval in NAMED_MINUTE_STEPS:
        if cron_field.interval == 1:
            return "every minute"
        return f"every {cron_field.interval} minutes"
    if isinstance(cron_field, ValueList):
        return f"at minutes {cron_field.raw}"
    if isinstance(cron_field, Range):
        return f"every minute from {cron_field.lo}-{cron_field.hi}"
    if isinstance(cron_field, Step):
        return f"every {cron_field.interval} minute(s)"
    return f"at minute {cron_field.value}"


def describe_hour(cron_field: CronField) -> str:
    if _is_wildcard(cron_field):
        return "every hour"
    if _is_wildcard_step(cron_field) and cron_field.interval == 1:
        return "every hour"
    value = single_value(cron_field)
    if value == 0:
        return "at midnight"
    if value == 12:
        return "at noon"
    if isinstance(cron_field, ValueList):
        return f"at hours {cron_field.raw}"
    if isinstance(cron_field, Range):
        return f"every hour from {cron_field.lo}-{cron_field.hi}"
    if isinstance(cron_field, Step):
        return f"every {cron_field.interval} hour(s)"
    return f"at {value}:00"


def describe_day_of_month(cron_field: CronField) -> str:
    if _is_wildcard(cron_field):
        return "every day of the month"
    if isinstance(cron_field, LastDay):
        return "on the last day of the month"
    if isinstance(cron_field, (ValueList, Range)):
        return f"on days {cron_field.raw} of the month"
    if isinstance(cron_field, Step):
        return f"every {cron_field.interval} day(s) of the month"
    value = single_value(cron_field)
    return f"on the {value}{ordinal_suffix(value)} of the month"


def describe_month(cron_field: CronField) -> str:
    if _is_wildcard(cron_field):
        return "every month"
    if isinstance(cron_field, ValueList):
        return "in " + ", ".join(month_name(member) for member in cron_field.members)
    if isinstance(cron_field, Range):
        start, end = _bound_names(cron_field, MONTH_NAMES)
        return f"from {start} to {end}"
    if isinstance(cron_field, Single):
        return f"in {MONTH_NAMES[cron_field.value]}"
    return f"in month {cron_field.raw}"


def describe_day_of_week(cron_field: CronField) -> str:
    if _is_wildcard(cron_field):
        return "on every day of the week"
    if isinstance(cron_field, Single):
        return f"on {WEEKDAY_NAMES[cron_field.value]}s"
    if cron_field.raw == "1-5":
        return "on weekdays"
    if cron_field.raw in WEEKEND_TOKENS:
        return "on weekends"
    if isinstance(cron_field, ValueList):
        return "on " + ", ".join(weekday_name(member) for member in cron_field.members)
    if isinstance(cron_field, Range):
        start, end = _bound_names(cron_field, WEEKDAY_NAMES)
        return f"from {start} to {end}"
    return f"on day {cron_field.raw} of the week"


# =============================================================================
# Whole expression
# =============================================================================


def _override(schedule: ParsedSchedule) -> Optional[str]:
    days_any = (
        _is_wildcard(schedule.day_of_month)
        and _is_wildcard(schedule.month)
    )
    if not days_any or schedule.minute.raw != "0":
        return None

    if schedule.hour.raw == "0":
        if _is_wildcard(schedule.day_of_week):
            return "once per day at midnight"
        if isinstance(schedule.day_of_week, Single) and schedule.day_of_week.raw == "0":
            return "at midnight on Sundays"
    elif _is_wildcard(schedule.hour) and _is_wildcard(schedule.day_of_week):
        return "at the start of every hour"
    return None


def describe(schedule: ParsedSchedule) -> str:
    """
    Render a human-readable description of a parsed schedule.

    Args:
        schedule: Validated schedule from parse_expression()

    Returns:
        A sentence starting with "This cron expression will run " and
        ending with a period.
    """
    override = _override(schedule)
    if override:
        return f"{PREFIX}{override}."

    minute_any = _is_wildcard(schedule.minute)
    hour_any = _is_wildcard(schedule.hour)
    minute_desc = describe_minute(schedule.minute)
    hour_desc = describe_hour(schedule.hour)

    if minute_any and not hour_any:
        description = "every minute " + hour_desc
    elif hour_any and not minute_any:
        description = minute_desc + " of every hour"
    else:
        description = minute_desc + " " + hour_desc

    if not _is_wildcard(schedule.day_of_month):
        description += " " + describe_day_of_month(schedule.day_of_month)
    if not _is_wildcard(schedule.month):
        description += " " + describe_month(schedule.month)
    if not _is_wildcard(schedule.day_of_week):
        description += " " + describe_day_of_week(schedule.day_of_week)

    return f"{PREFIX}{description}."
