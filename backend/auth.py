"""
API key authentication for the Rebound Edge API.

Keys come from API_KEY_USER1 .. API_KEY_USER5.  With ENVIRONMENT=development
and no keys configured, the insecure "dev-key-insecure" key is accepted so
the dashboard works out of the box locally.
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

DEV_API_KEY = "dev-key-insecure"
_MAX_USERS = 5


def get_valid_api_keys() -> Dict[str, str]:
    """Map each configured key to its user label (``user1`` .. ``user5``)."""
    keys = {}
    for i in range(1, _MAX_USERS + 1):
        key = os.getenv(f"API_KEY_USER{i}")
        if key:
            keys[key] = f"user{i}"

    if not keys and os.getenv("ENVIRONMENT") == "development":
        keys[DEV_API_KEY] = "dev_user"
    return keys


async def verify_api_key(api_key: str = Security(API_KEY_HEADER)) -> str:
    """
    Verify the X-API-Key header and return the user label.

    Keys are re-read on every call so rotating them in the environment
    takes effect without a restart.
    """
    valid = get_valid_api_keys()
    if not valid:
        logger.error("No API keys configured; set API_KEY_USER1")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="No API keys configured on the server.",
        )

    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API key required. Include 'X-API-Key' header.",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    if api_key not in valid:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    return valid[api_key]
