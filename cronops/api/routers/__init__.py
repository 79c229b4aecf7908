"""
API Routers package.
"""

from . import convert, expressions

__all__ = ["convert", "expressions"]
