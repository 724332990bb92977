"""
API key authentication for the /api routes.
"""
import logging
import os
import secrets

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

from lifetracker.constants import API_KEY_HEADER, DEFAULT_API_KEY

logger = logging.getLogger("lifetracker.auth")

api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


def get_api_key() -> str:
    """Configured API key, read from the environment on every call"""
    return os.getenv("LIFETRACKER_API_KEY", DEFAULT_API_KEY)


def is_default_api_key() -> bool:
    return get_api_key() == DEFAULT_API_KEY


async def verify_api_key(api_key: str = Security(api_key_header)):
    """
    Check the X-API-Key header against the configured key.

    Raises:
        HTTPException: 401 when the header is missing or does not match
    """
    if not api_key or not secrets.compare_digest(api_key, get_api_key()):
        reason = "invalid" if api_key else "missing"
        logger.warning(f"Rejected request: {reason} API key")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API Key"
        )
    return api_key
