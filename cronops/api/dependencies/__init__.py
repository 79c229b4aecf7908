"""
API Dependencies package.

Cross-cutting concerns like authentication.
"""

from .auth import API_KEY_HEADER, verify_api_key

__all__ = ["API_KEY_HEADER", "verify_api_key"]
