"""
Conversion schemas.

POST /api/convert request/response and the structured validation error.
Wire names are camelCase; snake_case is accepted on input.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cronops.infra.settings import MAX_OCCURRENCE_COUNT


class CamelModel(BaseModel):
    """Base model that accepts both camelCase and snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ConvertRequest(CamelModel):
    """Request to describe an expression and preview its fire times."""

    expression: str = Field(
        ...,
        description="Five-field cron expression (minute hour day-of-month month day-of-week)",
        json_schema_extra={"examples": ["*/15 * * * *", "0 9 * * 1-5"]}
    )
    count: Optional[int] = Field(
        default=None,
        ge=1,
        le=MAX_OCCURRENCE_COUNT,
        description="Number of upcoming executions (default from DEFAULT_OCCURRENCE_COUNT)"
    )


class ConvertResponse(CamelModel):
    """Human-readable description and upcoming executions."""

    description: str
    next_executions: List[str] = Field(
        default_factory=list,
        description="Formatted as 'Mon Jan 2 2006 at 15:04:05'"
    )


class ExpressionErrorDetail(CamelModel):
    """Structured detail of an invalid expression."""

    reason: str = Field(
        ...,
        description="MalformedExpression | InvalidStep | InvalidListMember | InvalidRange | "
                    "OutOfDomain | UnsatisfiableSchedule"
    )
    field_index: Optional[int] = Field(
        default=None,
        description="Offending field (0=minute ... 4=day-of-week), null for whole-expression errors"
    )
    token: Optional[str] = Field(default=None, description="Offending raw token")
    message: str
