"""
X-API-Key authentication for the odds analysis routes.

Each of ``API_KEY_USER1`` .. ``API_KEY_USER5`` holds one caller's key; the
caller is identified as ``user1`` .. ``user5``.  When none is set and
``ENVIRONMENT=development``, the fixed key :data:`DEV_API_KEY` is accepted.
The environment is consulted per request, so rotating a key needs no restart.
"""

import logging
import os
from typing import Dict

from dotenv import load_dotenv
from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

load_dotenv()

logger = logging.getLogger(__name__)

API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)

#: Number of ``API_KEY_USER<n>`` slots read from the environment.
KEY_SLOTS = 5

#: Accepted only in development when no user key is configured.
DEV_API_KEY = "dev-key-insecure"


def get_valid_api_keys() -> Dict[str, str]:
    """``{api_key: caller}`` for every configured key slot."""
    keys = {}
    for slot in range(1, KEY_SLOTS + 1):
        key = os.getenv(f"API_KEY_USER{slot}")
        if key:
            keys[key] = f"user{slot}"
    if not keys and os.getenv("ENVIRONMENT") == "development":
        keys[DEV_API_KEY] = "dev_user"
    return keys


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "ApiKey"},
    )


async def verify_api_key(api_key: str = Security(API_KEY_HEADER)) -> str:
    """FastAPI dependency resolving the ``X-API-Key`` header to a caller name.

    Raises:
        HTTPException: 401 when the header is missing or the key is unknown,
            503 when the server has no keys configured at all.
    """
    if not api_key:
        raise _unauthorized("API key required. Include 'X-API-Key' header.")

    valid_keys = get_valid_api_keys()
    if not valid_keys:
        logger.error("Rejecting request: no API_KEY_USER<n> configured")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="No API keys configured. Set API_KEY_USER1 in environment.",
        )

    caller = valid_keys.get(api_key)
    if caller is None:
        raise _unauthorized("Invalid API key")
    return caller
