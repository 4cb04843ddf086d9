"""Middleware tests: request ids, rate limiting and error bodies."""

from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from ambassador.config import get_settings
from ambassador.errors import DuplicateCompletionError, RecordNotFoundError, TransientIOError
from ambassador.main import create_app
from ambassador.middleware.rate_limit import RateLimitMiddleware
from ambassador.middleware.request_id import RequestIdMiddleware


class _FakePipeline:
    def __init__(self, counts: dict[str, int]) -> None:
        self._counts = counts
        self._key = ""

    def incr(self, key: str) -> None:
        self._key = key

    def expire(self, key: str, seconds: int) -> None:
        pass

    async def execute(self) -> list[Any]:
        self._counts[self._key] = self._counts.get(self._key, 0) + 1
        return [self._counts[self._key], True]


class _FakeRedis:
    def __init__(self) -> None:
        self.counts: dict[str, int] = {}

    def pipeline(self) -> _FakePipeline:
        return _FakePipeline(self.counts)


class TestRequestId:
    """X-Request-Id propagation."""

    @pytest.mark.asyncio
    async def test_generated_when_absent(self, client: AsyncClient):
        response = await client.get("/health")
        assert len(response.headers["X-Request-Id"]) == 36

    @pytest.mark.asyncio
    async def test_echoed_when_present(self, client: AsyncClient):
        response = await client.get("/health", headers={"X-Request-Id": "abc-123"})
        assert response.headers["X-Request-Id"] == "abc-123"

    @pytest.mark.asyncio
    async def test_oversized_id_replaced(self, client: AsyncClient):
        response = await client.get("/health", headers={"X-Request-Id": "x" * 500})
        assert response.headers["X-Request-Id"] != "x" * 500


class TestRateLimit:
    """Per-IP request counting."""

    @pytest.mark.asyncio
    async def test_passes_through_without_redis(self, client: AsyncClient):
        response = await client.get("/api/v1/intake/schools")
        assert response.status_code == 200
        assert "X-RateLimit-Limit" not in response.headers

    @pytest.mark.asyncio
    @pytest.mark.usefixtures("database")
    async def test_limit_enforced(self, monkeypatch):
        monkeypatch.setenv("AMB_RATE_LIMIT_REQUESTS", "3")
        monkeypatch.setenv("AMB_RATE_LIMIT_WINDOW_SECONDS", "3600")
        get_settings.cache_clear()
        fake = _FakeRedis()
        monkeypatch.setattr("ambassador.middleware.rate_limit.get_redis", lambda: fake)
        try:
            app = create_app()
        finally:
            get_settings.cache_clear()

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            statuses = [(await ac.get("/api/v1/intake/schools")).status_code for _ in range(4)]
            exempt = await ac.get("/health")

        assert statuses == [200, 200, 200, 429]
        assert exempt.status_code == 200


class TestErrorHandlers:
    """Domain errors that reach the app-level handler."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("exc", "status", "detail"),
        [
            (RecordNotFoundError("Widget", "w1"), 404, "Widget not found"),
            (DuplicateCompletionError("a1", "c1"), 409, "Already completed"),
            (TransientIOError("write"), 503, "Please try again"),
        ],
    )
    async def test_domain_error_mapping(self, exc, status, detail):
        app = create_app()

        @app.get("/boom")
        async def boom():
            raise exc

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            response = await ac.get("/boom")

        assert response.status_code == status
        assert response.json() == {"detail": detail}


class TestMiddlewareSetup:
    """What setup_middleware installs."""

    def test_rate_limiter_left_out_when_disabled(self, monkeypatch):
        monkeypatch.setenv("AMB_RATE_LIMIT_REQUESTS", "0")
        get_settings.cache_clear()
        try:
            app = create_app()
        finally:
            get_settings.cache_clear()

        installed = [m.cls for m in app.user_middleware]
        assert RateLimitMiddleware not in installed
        assert RequestIdMiddleware in installed

    @pytest.mark.asyncio
    async def test_cors_preflight_allows_admin_delete(self, client: AsyncClient):
        response = await client.options(
            "/api/v1/admin/challenges/abc",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "DELETE",
                "Access-Control-Request-Headers": "X-Admin-Key",
            },
        )
        assert response.status_code == 200
        assert "DELETE" in response.headers["access-control-allow-methods"]
