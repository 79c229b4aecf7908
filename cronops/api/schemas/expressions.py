"""
Expression registry schemas.

CRUD payloads for /api/expressions.
"""

from pydantic import BaseModel, Field

from .convert import CamelModel


class ExpressionRequest(CamelModel):
    """Create or replace a named expression."""

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    expression: str = Field(
        ...,
        max_length=255,
        description="Five-field cron expression, validated before storing",
        json_schema_extra={"examples": ["0 0 1 * *"]}
    )
    description: str = Field(default="", description="Free-text description")


class ExpressionResponse(BaseModel):
    """A stored expression. Timestamps stay snake_case on the wire."""

    id: int = Field(..., description="Store-assigned identifier")
    name: str
    expression: str
    description: str = ""
    created_at: str = Field(..., description="Creation timestamp (ISO format)")
    updated_at: str = Field(..., description="Last update timestamp (ISO format)")


class ExpressionDeleteResponse(CamelModel):
    """Response from expression deletion."""

    message: str
