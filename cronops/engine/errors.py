"""
Cron engine exceptions.

Every parser error is field-local: it carries a machine-readable reason
code, the offending field index (0-4, None when the expression as a whole
is malformed) and the raw token. Callers render these into precise
messages; none of them is a process-fatal fault.
"""

from typing import Optional

FIELD_NAMES = ("minute", "hour", "day-of-month", "month", "day-of-week")


class CronExpressionError(ValueError):
    """Base exception for all cron engine errors."""

    reason = "CronExpressionError"

    def __init__(
        self,
        message: str,
        field_index: Optional[int] = None,
        token: Optional[str] = None,
        expression: str = "",
    ):
        self.message = message
        self.field_index = field_index
        self.token = token
        self.expression = expression
        super().__init__(self._format())

    @property
    def field_name(self) -> Optional[str]:
        if self.field_index is None:
            return None
        return FIELD_NAMES[self.field_index]

    def _format(self) -> str:
        if self.field_index is None:
            return self.message
        return f"{self.message} ({self.field_name} field, token {self.token!r})"

    def to_dict(self) -> dict:
        """Structured form for API error payloads."""
        return {
            "reason": self.reason,
            "field_index": self.field_index,
            "token": self.token,
            "message": str(self),
        }


class MalformedExpression(CronExpressionError):
    """Raised when the expression does not split into exactly five fields."""

    reason = "MalformedExpression"


class InvalidStep(CronExpressionError):
    """Raised when a step interval is non-positive or the step is malformed."""

    reason = "InvalidStep"


class InvalidListMember(CronExpressionError):
    """Raised when a list member is non-numeric or outside the field domain."""

    reason = "InvalidListMember"


class InvalidRange(CronExpressionError):
    """Raised when a range is inverted or a bound is outside the field domain."""

    reason = "InvalidRange"


class OutOfDomain(CronExpressionError):
    """Raised when a single value is outside the field domain or not a number."""

    reason = "OutOfDomain"


class UnsatisfiableSchedule(CronExpressionError):
    """
    Raised when the occurrence search exceeds its horizon or runs past
    the end of the datetime range.

    Validated schedules always parse, but some never fire
    (e.g. "0 0 30 2 *", February 30th).
    """

    reason = "UnsatisfiableSchedule"
