"""
API key protection for the /api endpoints.
"""
import os
import secrets

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

DEFAULT_API_KEY = "change-me"

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def get_api_key() -> str:
    """Configured key, read on every call so it can be rotated without a restart"""
    return os.getenv("HABIT_FORECAST_API_KEY", DEFAULT_API_KEY)


async def verify_api_key(api_key: str = Security(api_key_header)) -> str:
    """Reject requests without a matching X-API-Key header"""
    if not api_key or not secrets.compare_digest(api_key, get_api_key()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API Key"
        )
    return api_key
