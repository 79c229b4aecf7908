"""
Conversion facade.

parse -> describe + next occurrences, with occurrences rendered the way the
web front end displays them ("Mon Jan 2 2006 at 15:04:05").
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple, Union

from .describe import describe
from .fields import ParsedSchedule
from .occurrences import next_occurrences
from .parser import parse_expression

DEFAULT_COUNT = 5

_SHORT_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_SHORT_MONTHS = (
    "", "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


@dataclass(frozen=True)
class ConversionResult:
    """Description and upcoming fire times for one expression."""

    expression: str
    description: str
    occurrences: Tuple[datetime, ...]

    @property
    def next_executions(self) -> Tuple[str, ...]:
        return tuple(format_occurrence(o) for o in self.occurrences)

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "nextExecutions": list(self.next_executions),
        }


def format_occurrence(instant: datetime) -> str:
    """Locale-independent "Weekday Month Day Year at HH:MM:SS" rendering."""
    return (
        f"{_SHORT_WEEKDAYS[instant.weekday()]} {_SHORT_MONTHS[instant.month]} "
        f"{instant.day} {instant.year} at {instant:%H:%M:%S}"
    )


def convert(
    expression: Union[str, ParsedSchedule],
    count: int = DEFAULT_COUNT,
    now: Optional[datetime] = None,
) -> ConversionResult:
    """
    Describe an expression and compute its next occurrences.

    Args:
        expression: Raw expression or an already parsed schedule
        count: Number of occurrences to compute
        now: Reference instant (default: current local time)

    Raises:
        CronExpressionError: Invalid expression or unsatisfiable schedule
    """
    schedule = expression if isinstance(expression, ParsedSchedule) else parse_expression(expression)
    reference = now if now is not None else datetime.now()

    return ConversionResult(
        expression=str(schedule),
        description=describe(schedule),
        occurrences=tuple(next_occurrences(schedule, reference, count)),
    )
