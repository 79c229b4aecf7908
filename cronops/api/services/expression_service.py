"""
Expression service for API operations.

Bridges the cron engine and the HTTP layer: validates expressions, records
outcome metrics, and turns engine errors into HTTP errors with a structured
detail payload.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException, status

from cronops.engine import (
    ConversionResult,
    CronExpressionError,
    ParsedSchedule,
    UnsatisfiableSchedule,
    convert,
    parse_expression,
)
from cronops.infra import metrics

from ..schemas.convert import ExpressionErrorDetail

logger = logging.getLogger(__name__)


def to_http_exception(error: CronExpressionError) -> HTTPException:
    """
    Map an engine error to an HTTPException.

    Parser errors are client errors (400). An unsatisfiable schedule parsed
    fine but never fires (422).
    """
    detail = ExpressionErrorDetail(
        reason=error.reason,
        field_index=error.field_index,
        token=error.token,
        message=str(error),
    )
    status_code = (
        422
        if isinstance(error, UnsatisfiableSchedule)
        else status.HTTP_400_BAD_REQUEST
    )
    return HTTPException(status_code=status_code, detail=detail.model_dump(by_alias=True))


def require_valid_expression(expression: str) -> ParsedSchedule:
    """
    Parse an expression or raise a 400 HTTPException.

    Counts rejected expressions in invalid_cron_expressions_total.
    """
    try:
        return parse_expression(expression)
    except CronExpressionError as e:
        metrics.invalid_cron_expressions_total.inc()
        logger.info(f"[ExpressionService] Rejected expression {expression!r}: {e.reason} - {e}")
        raise to_http_exception(e)


def convert_expression(
    expression: str,
    count: int,
    now: Optional[datetime] = None,
) -> ConversionResult:
    """Validate, describe and compute upcoming executions."""
    schedule = require_valid_expression(expression)
    try:
        return convert(schedule, count=count, now=now)
    except CronExpressionError as e:
        logger.warning(f"[ExpressionService] Conversion failed for {expression!r}: {e}")
        raise to_http_exception(e)
