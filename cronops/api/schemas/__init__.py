"""
API Schemas package.

Pydantic models for request/response validation.
"""

from .convert import (
    CamelModel,
    ConvertRequest,
    ConvertResponse,
    ExpressionErrorDetail,
)
from .expressions import (
    ExpressionDeleteResponse,
    ExpressionRequest,
    ExpressionResponse,
)

__all__ = [
    "CamelModel",
    "ConvertRequest",
    "ConvertResponse",
    "ExpressionErrorDetail",
    "ExpressionDeleteResponse",
    "ExpressionRequest",
    "ExpressionResponse",
]
