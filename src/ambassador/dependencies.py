"""Shared FastAPI dependencies."""

from collections.abc import AsyncGenerator

from fastapi import Header, HTTPException

from ambassador.config import get_settings
from ambassador.redis_client import get_redis as _get_redis
from ambassador.scoring.waitlist import ScoringParams, scoring_params_from_settings


async def get_redis_dep() -> AsyncGenerator[object, None]:
    """Yield the Redis client, or None when Redis is not initialized.

    Redis only carries best-effort broadcasts here, so its absence must not
    fail the request.
    """
    try:
        redis = _get_redis()
    except RuntimeError:
        redis = None
    yield redis


def get_scoring_params() -> ScoringParams:
    """Scoring constants from settings."""
    return scoring_params_from_settings(get_settings())


async def require_admin(x_admin_key: str | None = Header(None)) -> None:
    """Gate back-office routes on the X-Admin-Key header."""
    expected = get_settings().admin_api_key
    if not expected:
        raise HTTPException(status_code=503, detail="Admin access is not configured")
    if x_admin_key != expected:
        raise HTTPException(status_code=401, detail="Invalid admin key")
