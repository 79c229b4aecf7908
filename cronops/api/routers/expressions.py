"""
Expressions router for the named-expression registry.

Endpoints:
- GET    /api/expressions       - List expressions (newest first)
- POST   /api/expressions       - Create an expression
- GET    /api/expressions/{id}  - Get an expression
- PUT    /api/expressions/{id}  - Replace an expression
- DELETE /api/expressions/{id}  - Delete an expression

Expressions are validated with the cron engine before they are stored.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from cronops.infra import metrics
from cronops.registry import ExpressionNotFoundError, ExpressionRegistry, get_registry

from ..schemas.convert import ExpressionErrorDetail
from ..schemas.expressions import (
    ExpressionDeleteResponse,
    ExpressionRequest,
    ExpressionResponse,
)
from ..services.expression_service import require_valid_expression

logger = logging.getLogger(__name__)

router = APIRouter()

_INVALID = {400: {"model": ExpressionErrorDetail, "description": "Invalid cron expression"}}
_NOT_FOUND = {404: {"description": "Expression not found"}}


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expression not found")


def _to_response(record) -> ExpressionResponse:
    return ExpressionResponse(**record.to_dict())


@router.get("", response_model=List[ExpressionResponse])
def list_expressions(registry: ExpressionRegistry = Depends(get_registry)):
    """List stored expressions, newest first."""
    return [_to_response(record) for record in registry.list_all()]


@router.post(
    "",
    response_model=ExpressionResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_INVALID,
)
def create_expression(
    request: ExpressionRequest,
    registry: ExpressionRegistry = Depends(get_registry),
):
    """Validate and store a named expression."""
    require_valid_expression(request.expression)

    record = registry.create(
        name=request.name,
        expression=request.expression,
        description=request.description,
    )
    metrics.cron_expressions_total.inc()

    return _to_response(record)


@router.get("/{expression_id}", response_model=ExpressionResponse, responses=_NOT_FOUND)
def get_expression(
    expression_id: int,
    registry: ExpressionRegistry = Depends(get_registry),
):
    """Get a stored expression by id."""
    try:
        return _to_response(registry.get(expression_id))
    except ExpressionNotFoundError:
        raise _not_found()


@router.put(
    "/{expression_id}",
    response_model=ExpressionResponse,
    responses={**_INVALID, **_NOT_FOUND},
)
def update_expression(
    expression_id: int,
    request: ExpressionRequest,
    registry: ExpressionRegistry = Depends(get_registry),
):
    """Validate and replace a stored expression."""
    require_valid_expression(request.expression)

    try:
        record = registry.update(
            expression_id,
            name=request.name,
            expression=request.expression,
            description=request.description,
        )
    except ExpressionNotFoundError:
        raise _not_found()

    return _to_response(record)


@router.delete(
    "/{expression_id}",
    response_model=ExpressionDeleteResponse,
    responses=_NOT_FOUND,
)
def delete_expression(
    expression_id: int,
    registry: ExpressionRegistry = Depends(get_registry),
):
    """Delete a stored expression."""
    try:
        registry.delete(expression_id)
    except ExpressionNotFoundError:
        raise _not_found()

    return ExpressionDeleteResponse(message="Expression deleted successfully")
