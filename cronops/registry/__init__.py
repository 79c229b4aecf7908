"""
Persistent registry of named cron expressions.
"""

from .expression_registry import (
    PRESETS,
    SCHEMA_VERSION,
    ExpressionNotFoundError,
    ExpressionRecord,
    ExpressionRegistry,
    RegistryError,
    close_registry,
    get_registry,
    init_registry,
)

__all__ = [
    "PRESETS",
    "SCHEMA_VERSION",
    "ExpressionNotFoundError",
    "ExpressionRecord",
    "ExpressionRegistry",
    "RegistryError",
    "close_registry",
    "get_registry",
    "init_registry",
]
