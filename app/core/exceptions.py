"""
Domain exception taxonomy and its HTTP mapping.

Services raise these instead of HTTPException so they stay usable outside a
request (Celery workers, scripts). The handlers registered in main.py turn
them into JSON error responses.
"""

import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class PlatformError(Exception):
    """Base class for all domain errors."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PlatformError):
    """Malformed request shape or out-of-range value."""
    status_code = 400


class NotFoundError(PlatformError):
    """Unknown id or token."""
    status_code = 404


class ConflictError(PlatformError):
    """Disqualified candidate, duplicate interview, invalid invitation."""
    status_code = 403


class UpstreamProviderError(PlatformError):
    """AI provider or network failure."""
    status_code = 502


class StorageError(PlatformError):
    """Database write failed."""
    status_code = 500


async def platform_error_handler(request: Request, exc: PlatformError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are a 400, not FastAPI's default 422."""
    errors = [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid input data", "errors": errors}
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PlatformError, platform_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
