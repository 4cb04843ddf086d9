"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from ambassador.admin.router import router as admin_router
from ambassador.config import get_settings
from ambassador.database import close_db, init_db
from ambassador.health.router import router as health_router
from ambassador.intake.router import router as intake_router
from ambassador.middleware import setup_middleware
from ambassador.portal.router import router as portal_router
from ambassador.redis_client import close_redis, init_redis

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the database engine and Redis pool; close them on shutdown."""
    settings = get_settings()
    await init_db(settings.database_url)
    await init_redis(settings.redis_url)
    logger.info("app_started", environment=settings.environment, version=settings.app_version)

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Ambassador Waitlist API",
        description="Ambassador program intake, waitlist ranking, boosts and opportunities",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(intake_router)
    app.include_router(portal_router)
    app.include_router(admin_router)

    return app


app = create_app()
