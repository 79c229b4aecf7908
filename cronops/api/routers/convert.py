"""
Convert router.

Endpoints:
- POST /api/convert - Describe an expression and list its next executions
"""

import logging

from fastapi import APIRouter

from cronops.infra.settings import get_default_occurrence_count

from ..schemas.convert import ConvertRequest, ConvertResponse, ExpressionErrorDetail
from ..services.expression_service import convert_expression

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/convert",
    response_model=ConvertResponse,
    responses={
        400: {"model": ExpressionErrorDetail, "description": "Invalid cron expression"},
        422: {"description": "Schedule never fires, or request body invalid"},
    },
)
async def convert_cron(request: ConvertRequest):
    """
    Convert a cron expression to a description and upcoming executions.

    Executions are computed from the server's current local time.
    """
    count = request.count or get_default_occurrence_count()
    result = convert_expression(request.expression, count)

    logger.debug(f"[ConvertAPI] {request.expression!r} -> {result.description}")

    return ConvertResponse(
        description=result.description,
        next_executions=list(result.next_executions),
    )
