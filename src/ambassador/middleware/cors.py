"""CORS for the waitlist site and admin dashboard origins."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ambassador.config import Settings

_METHODS = ["GET", "POST", "PATCH", "DELETE", "OPTIONS"]
_REQUEST_HEADERS = ["Content-Type", "X-Admin-Key", "X-Request-Id"]


def setup_cors(app: FastAPI, settings: Settings) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=_METHODS,
        allow_headers=_REQUEST_HEADERS,
        expose_headers=["X-Request-Id", "X-RateLimit-Remaining", "X-RateLimit-Limit"],
    )
