"""Middleware registration."""

from fastapi import FastAPI

from ambassador.config import Settings
from ambassador.middleware.cors import setup_cors
from ambassador.middleware.error_handler import setup_error_handlers
from ambassador.middleware.logging import setup_logging
from ambassador.middleware.rate_limit import RateLimitMiddleware
from ambassador.middleware.request_id import RequestIdMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Install logging, error bodies and the request middleware stack.

    Request order, outermost first: CORS, request id, rate limit. A
    non-positive ``rate_limit_requests`` leaves the rate limiter out.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    if settings.rate_limit_requests > 0:
        app.add_middleware(
            RateLimitMiddleware,
            requests_per_window=settings.rate_limit_requests,
            window_seconds=settings.rate_limit_window_seconds,
        )
    app.add_middleware(RequestIdMiddleware)
    # Added last so 429 and error responses still get CORS headers
    setup_cors(app, settings)
