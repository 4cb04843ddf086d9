"""Exception handlers that keep every error body in {"detail": ...} form."""

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ambassador.errors import AmbassadorError, ConflictError, RecordNotFoundError, TransientIOError

logger = structlog.get_logger()


def _status_for(exc: AmbassadorError) -> int:
    if isinstance(exc, RecordNotFoundError):
        return 404
    if isinstance(exc, ConflictError):
        return 409
    if isinstance(exc, TransientIOError):
        return 503
    return 400


def setup_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": "Validation error", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(AmbassadorError)
    async def domain_exception_handler(request: Request, exc: AmbassadorError) -> JSONResponse:
        """Domain errors that escaped a router's own mapping."""
        status_code = _status_for(exc)
        logger.warning(
            "domain_error",
            path=request.url.path,
            error_type=type(exc).__name__,
            status_code=status_code,
        )
        detail = "Please try again" if status_code == 503 else str(exc)
        return JSONResponse(status_code=status_code, content={"detail": detail})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
