"""
Cron expression engine.

Parse, describe, and predict five-field cron schedules. Pure and
synchronous; holds no state between calls.
"""

from .convert import DEFAULT_COUNT, ConversionResult, convert, format_occurrence
from .describe import describe
from .errors import (
    CronExpressionError,
    InvalidListMember,
    InvalidRange,
    InvalidStep,
    MalformedExpression,
    OutOfDomain,
    UnsatisfiableSchedule,
)
from .fields import (
    CronField,
    LastDay,
    ParsedSchedule,
    Range,
    Single,
    Step,
    ValueList,
    Wildcard,
)
from .occurrences import iter_occurrences, next_occurrence, next_occurrences
from .parser import is_valid_expression, parse_expression, validate_expression

__all__ = [
    "DEFAULT_COUNT",
    "ConversionResult",
    "convert",
    "format_occurrence",
    "describe",
    "CronExpressionError",
    "InvalidListMember",
    "InvalidRange",
    "InvalidStep",
    "MalformedExpression",
    "OutOfDomain",
    "UnsatisfiableSchedule",
    "CronField",
    "LastDay",
    "ParsedSchedule",
    "Range",
    "Single",
    "Step",
    "ValueList",
    "Wildcard",
    "iter_occurrences",
    "next_occurrence",
    "next_occurrences",
    "is_valid_expression",
    "parse_expression",
    "validate_expression",
]
