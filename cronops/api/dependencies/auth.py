"""
X-API-Key check for the /api routers.

Off unless API_AUTH_ENABLED is true; the accepted key is API_KEY. Both are
read per request through cronops.infra.settings, so changing the
environment takes effect without re-importing the app.
"""

import logging
import secrets
from typing import Optional

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

from cronops.infra import settings

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"

api_key_header = APIKeyHeader(
    name=API_KEY_HEADER,
    auto_error=False,  # Missing header is only an error when auth is enabled
    description="API key for /api endpoints (required when API_AUTH_ENABLED=true)",
)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "ApiKey"},
    )


async def verify_api_key(
    api_key: Optional[str] = Security(api_key_header),
) -> Optional[str]:
    """
    Reject requests without a matching key while auth is enabled.

    Returns:
        The accepted key, or None when auth is disabled

    Raises:
        HTTPException: 401 for a missing or wrong key
    """
    if not settings.is_api_auth_enabled():
        return None

    if not api_key:
        raise _unauthorized(f"Missing API key. Provide {API_KEY_HEADER} header.")

    expected = settings.get_api_key()
    if not expected:
        logger.warning("[Auth] API_AUTH_ENABLED is set but API_KEY is empty, rejecting request")
        raise _unauthorized("Invalid API key")

    if not secrets.compare_digest(api_key.encode(), expected.encode()):
        raise _unauthorized("Invalid API key")

    return api_key
