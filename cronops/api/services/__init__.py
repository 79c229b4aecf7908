"""
API Services package.

Glue between routers and the engine/registry.
"""

from .expression_service import (
    convert_expression,
    require_valid_expression,
    to_http_exception,
)

__all__ = ["convert_expression", "require_valid_expression", "to_http_exception"]
