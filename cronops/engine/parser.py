"""
Field parser and validator.

Turns a raw five-field expression into a ParsedSchedule or raises a typed
CronExpressionError identifying the offending field and token.

Token classification (per field, independently):
    *                   -> Wildcard
    */n, lo-hi/n        -> Step          (InvalidStep if n <= 0)
    (a "/" token outside that grammar falls through to the rules below)
    a,b,lo-hi           -> ValueList     (InvalidListMember)
    lo-hi               -> Range         (InvalidRange)
    L  (day-of-month)   -> LastDay
    n                   -> Single        (OutOfDomain)

Day-of-week values of 7 are normalized to 0 in singles and list members.
The raw token keeps the original digit for description wording.
"""

import re
from typing import Optional, Type

from .errors import (
    CronExpressionError,
    InvalidListMember,
    InvalidRange,
    InvalidStep,
    MalformedExpression,
    OutOfDomain,
)
from .fields import (
    FIELD_DOMAINS,
    CronField,
    FieldDomain,
    FieldPosition,
    LastDay,
    ParsedSchedule,
    Range,
    Single,
    Step,
    ValueList,
    Wildcard,
)

FIELD_COUNT = 5

_NUMBER_RE = re.compile(r"[0-9]+")
_STEP_RE = re.compile(r"(\*|[0-9]+-[0-9]+)/([0-9]+)")


class FieldParser:
    """Parses a single token for one field position."""

    def __init__(self, position: int, expression: str = ""):
        self.position = FieldPosition(position)
        self.domain: FieldDomain = FIELD_DOMAINS[position]
        self.expression = expression

    def _error(self, error_cls: Type[CronExpressionError], message: str, token: str) -> CronExpressionError:
        return error_cls(
            message,
            field_index=int(self.position),
            token=token,
            expression=self.expression,
        )

    def _normalize(self, value: int) -> int:
        if self.position == FieldPosition.DAY_OF_WEEK and value == 7:
            return 0
        return value

    def _to_int(self, text: str) -> Optional[int]:
        if not _NUMBER_RE.fullmatch(text):
            return None
        return int(text)

    def parse(self, token: str) -> CronField:
        if token == "*":
            return Wildcard(raw=token)
        if _STEP_RE.fullmatch(token):
            return self._parse_step(token)
        if "," in token:
            return self._parse_list(token)
        if "-" in token:
            return self._parse_range(token, InvalidRange)
        if token == "L" and self.position == FieldPosition.DAY_OF_MONTH:
            return LastDay(raw=token)
        return self._parse_single(token, OutOfDomain)

    def _parse_single(self, token: str, error_cls: Type[CronExpressionError]) -> Single:
        value = self._to_int(token)
        if value is None:
            raise self._error(error_cls, f"Invalid value {token!r}", token)
        if not self.domain.contains(value):
            raise self._error(
                error_cls,
                f"Value {value} out of range "
                f"[{self.domain.min_value}-{self.domain.max_value}]",
                token,
            )
        return Single(self._normalize(value), raw=token)

    def _parse_range(self, token: str, error_cls: Type[CronExpressionError]) -> Range:
        parts = token.split("-")
        if len(parts) != 2:
            raise self._error(error_cls, f"Invalid range {token!r}", token)

        lo = self._to_int(parts[0])
        hi = self._to_int(parts[1])
        if lo is None or hi is None:
            raise self._error(error_cls, f"Invalid range {token!r}", token)
        if not self.domain.contains(lo) or not self.domain.contains(hi):
            raise self._error(
                error_cls,
                f"Range {lo}-{hi} out of range "
                f"[{self.domain.min_value}-{self.domain.max_value}]",
                token,
            )
        if lo > hi:
            raise self._error(error_cls, f"Range start {lo} is after end {hi}", token)

        # 7-7 is Sunday only; an upper bound of 7 is kept so that 5-7 stays valid.
        if self.position == FieldPosition.DAY_OF_WEEK and lo == 7:
            return Range(0, 0, raw=token)
        return Range(lo, hi, raw=token)

    def _parse_list(self, token: str) -> ValueList:
        members = []
        for member in token.split(","):
            if "-" in member:
                members.append(self._parse_range(member, InvalidListMember))
            else:
                members.append(self._parse_single(member, InvalidListMember))
        return ValueList(tuple(members), raw=token)

    def _parse_step(self, token: str) -> Step:
        base_text, interval_text = _STEP_RE.fullmatch(token).groups()
        interval = int(interval_text)
        if interval <= 0:
            raise self._error(
                InvalidStep, f"Step interval must be a positive integer: {interval_text!r}", token
            )

        if base_text == "*":
            base = Wildcard()
        else:
            base = self._parse_range(base_text, InvalidRange)

        return Step(base, interval, raw=token)


def parse_expression(expression: str) -> ParsedSchedule:
    """
    Parse and validate a five-field cron expression.

    Args:
        expression: Raw expression, fields separated by whitespace

    Returns:
        ParsedSchedule with one CronField per position

    Raises:
        CronExpressionError: MalformedExpression, InvalidStep,
            InvalidListMember, InvalidRange or OutOfDomain
    """
    if not isinstance(expression, str):
        raise MalformedExpression("Expression must be a string", expression="")

    tokens = expression.split()
    if len(tokens) != FIELD_COUNT:
        raise MalformedExpression(
            f"Expected {FIELD_COUNT} fields, got {len(tokens)}",
            expression=expression,
        )

    fields = [
        FieldParser(index, expression).parse(token)
        for index, token in enumerate(tokens)
    ]
    return ParsedSchedule(*fields, expression=expression.strip())


def validate_expression(expression: str) -> Optional[CronExpressionError]:
    """Return the validation error for an expression, or None when it is valid."""
    try:
        parse_expression(expression)
    except CronExpressionError as e:
        return e
    return None


def is_valid_expression(expression: str) -> bool:
    return validate_expression(expression) is None
