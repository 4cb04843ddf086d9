"""Optional Redis client used for rate-limit counters and live broadcasts.

With an empty ``redis_url`` no client is created: callers get RuntimeError
from get_redis(), rate limiting passes through and broadcasts are skipped.
"""

import redis.asyncio as redis
import structlog

logger = structlog.get_logger()

_client: redis.Redis | None = None


async def init_redis(url: str) -> None:
    """Create the shared client. No connection is made until first use."""
    global _client  # noqa: PLW0603
    if not url:
        _client = None
        logger.info("redis_disabled")
        return
    _client = redis.from_url(  # type: ignore[no-untyped-call]
        url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=20,
    )


async def close_redis() -> None:
    global _client  # noqa: PLW0603
    if _client is not None:
        await _client.aclose()
        _client = None


def get_redis() -> redis.Redis:
    """Return the shared client, or raise RuntimeError when Redis is off."""
    if _client is None:
        msg = "Redis not initialized"
        raise RuntimeError(msg)
    return _client
