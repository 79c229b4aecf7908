"""
Occurrence calculator.

Walks candidate instants forward from a reference instant and collects the
ones a schedule fires at. Candidates are whole minutes strictly after the
reference. When a coarser field cannot match (month, day, hour) the walk
jumps to the start of the next month/day/hour instead of testing each
minute in between; the sequence of accepted instants is the same as a
plain minute-by-minute walk.

Day selection follows the cron OR-rule (see ParsedSchedule.matches_day).
"""

import logging
from datetime import datetime, timedelta
from typing import Iterator, List

from .errors import UnsatisfiableSchedule
from .fields import FIELD_DOMAINS, FieldPosition, ParsedSchedule

logger = logging.getLogger(__name__)

# Any satisfiable five-field schedule recurs within four years (leap day);
# a per-occurrence horizon above that bounds the walk.
SEARCH_HORIZON = timedelta(days=366 * 5)

ONE_MINUTE = timedelta(minutes=1)

_MINUTE = FIELD_DOMAINS[FieldPosition.MINUTE]
_HOUR = FIELD_DOMAINS[FieldPosition.HOUR]
_MONTH = FIELD_DOMAINS[FieldPosition.MONTH]


def truncate_to_minute(instant: datetime) -> datetime:
    return instant.replace(second=0, microsecond=0)


def _start_of_next_month(instant: datetime) -> datetime:
    if instant.month == 12:
        return instant.replace(year=instant.year + 1, month=1, day=1, hour=0, minute=0)
    return instant.replace(month=instant.month + 1, day=1, hour=0, minute=0)


def _start_of_next_day(instant: datetime) -> datetime:
    return (instant + timedelta(days=1)).replace(hour=0, minute=0)


def _start_of_next_hour(instant: datetime) -> datetime:
    return (instant + timedelta(hours=1)).replace(minute=0)


def _search_limit(candidate: datetime) -> datetime:
    """candidate + SEARCH_HORIZON, capped at the last representable instant."""
    try:
        return candidate + SEARCH_HORIZON
    except OverflowError:
        return datetime.max.replace(tzinfo=candidate.tzinfo)


def next_occurrence(schedule: ParsedSchedule, after: datetime) -> datetime:
    """
    First instant strictly after `after` at which the schedule fires.

    Args:
        schedule: Validated schedule
        after: Reference instant (naive or aware; tzinfo is preserved)

    Returns:
        Matching instant with seconds and microseconds zeroed

    Raises:
        UnsatisfiableSchedule: No match within SEARCH_HORIZON, or none
            before the end of the datetime range
    """
    try:
        candidate = truncate_to_minute(after) + ONE_MINUTE
        limit = _search_limit(candidate)

        while candidate <= limit:
            if not schedule.month.matches(candidate.month, _MONTH):
                candidate = _start_of_next_month(candidate)
            elif not schedule.matches_day(candidate):
                candidate = _start_of_next_day(candidate)
            elif not schedule.hour.matches(candidate.hour, _HOUR):
                candidate = _start_of_next_hour(candidate)
            elif not schedule.minute.matches(candidate.minute, _MINUTE):
                candidate += ONE_MINUTE
            else:
                return candidate
    # Stepping past year 9999 raises OverflowError (arithmetic) or ValueError (replace)
    except (OverflowError, ValueError):
        logger.warning(f"[Occurrences] Reached end of datetime range for '{schedule}' after {after.isoformat()}")
        reason = "before the end of the supported datetime range"
    else:
        logger.warning(f"[Occurrences] No match within horizon for '{schedule}' after {after.isoformat()}")
        reason = f"within {SEARCH_HORIZON.days} days"

    raise UnsatisfiableSchedule(
        f"Schedule '{schedule}' has no occurrence {reason} after {after.isoformat()}",
        expression=schedule.expression,
    )


def iter_occurrences(schedule: ParsedSchedule, after: datetime) -> Iterator[datetime]:
    """Yield occurrences in strictly increasing order, without end."""
    current = after
    while True:
        current = next_occurrence(schedule, current)
        yield current


def next_occurrences(schedule: ParsedSchedule, after: datetime, count: int = 5) -> List[datetime]:
    """
    The next `count` occurrences strictly after `after`.

    Each step starts from the previous occurrence, so results are strictly
    increasing and never contain duplicates.
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")

    occurrences = []
    iterator = iter_occurrences(schedule, after)
    for _ in range(count):
        occurrences.append(next(iterator))
    return occurrences
