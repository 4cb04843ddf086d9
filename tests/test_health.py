"""Health endpoint tests."""

import pytest
from httpx import AsyncClient

from ambassador.redis_client import get_redis, init_redis


@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_readiness_without_redis(client: AsyncClient) -> None:
    """Database up and Redis not configured reports degraded, not down."""
    response = await client.get("/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["checks"] == {"database": "ok", "redis": "disabled"}
    assert data["status"] == "degraded"


@pytest.mark.asyncio
async def test_version(client: AsyncClient) -> None:
    response = await client.get("/version")
    assert response.status_code == 200
    assert response.json()["version"] == "0.1.0"


@pytest.mark.asyncio
async def test_empty_redis_url_disables_redis() -> None:
    await init_redis("")
    with pytest.raises(RuntimeError):
        get_redis()
