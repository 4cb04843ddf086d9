"""Best-effort Redis pub/sub broadcasts for the live activity ticker."""

from __future__ import annotations

import json

import structlog

logger = structlog.get_logger()

APPLICANT_JOINED_CHANNEL = "pubsub:applicant_joined"
BOOST_COMPLETED_CHANNEL = "pubsub:boost_completed"


async def publish_event(redis: object, channel: str, payload: dict) -> bool:
    """Publish a JSON payload. Returns False (and logs) instead of raising."""
    if redis is None:
        return False
    try:
        await redis.publish(channel, json.dumps(payload))  # type: ignore[attr-defined]
    except Exception:
        logger.warning("event_publish_failed", channel=channel, exc_info=True)
        return False
    return True
