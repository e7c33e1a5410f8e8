"""
X-API-Key authentication for the classifier routers.

API_AUTH_ENABLED and API_KEY are read when this module is imported. /health
is mounted without this dependency and stays open.
"""

import logging
import os
import secrets
from typing import Optional

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

logger = logging.getLogger(__name__)

_TRUTHY = ("true", "1", "yes", "on")

API_AUTH_ENABLED = os.getenv("API_AUTH_ENABLED", "false").strip().lower() in _TRUTHY
API_KEY = os.getenv("API_KEY", "").strip()

if API_AUTH_ENABLED and not API_KEY:
    logger.warning("[Auth] API_AUTH_ENABLED is set but API_KEY is empty; protected routes will reject every request")

api_key_header = APIKeyHeader(
    name="X-API-Key",
    auto_error=False,
    description="Classifier API key (checked when API_AUTH_ENABLED=true)",
)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "ApiKey"},
    )


async def verify_api_key(api_key: Optional[str] = Security(api_key_header)) -> Optional[str]:
    """
    Router dependency guarding analysis, dedup and post-group routes.

    Returns:
        The accepted key, or None when auth is disabled

    Raises:
        HTTPException: 401 when the header is missing or does not match API_KEY
    """
    if not API_AUTH_ENABLED:
        return None

    if not api_key:
        raise _unauthorized("Missing API key. Provide X-API-Key header.")

    if not API_KEY or not secrets.compare_digest(api_key.encode(), API_KEY.encode()):
        logger.warning("[Auth] Rejected request with an invalid API key")
        raise _unauthorized("Invalid API key")

    return api_key
