"""
Global error handling for the FastAPI application.

Catches VoxnoteError subclasses, Pydantic validation errors, and
unhandled exceptions, converting them into a consistent JSON envelope
``{"detail", "code", "timestamp"}``.
"""

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.core.exceptions import AuthenticationError, VoxnoteError

logger = logging.getLogger(__name__)


def _envelope(status_code: int, detail, code: str, timestamp: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": detail,
            "code": code,
            "timestamp": timestamp or datetime.now(UTC).isoformat(),
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application.

    1. ``VoxnoteError``: domain errors keep their own status and code.
    2. ``RequestValidationError``: malformed body/params (422).
    3. ``Exception``: anything else becomes an opaque 500.

    Args:
        app: The FastAPI application instance to register handlers on.
    """

    @app.exception_handler(VoxnoteError)
    async def voxnote_error_handler(request: Request, exc: VoxnoteError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.warning("%s %s failed: [%s] %s", request.method, request.url.path, exc.code, exc.detail)
        response = _envelope(exc.status_code, exc.detail, exc.code, exc.timestamp)
        if isinstance(exc, AuthenticationError):
            response.headers["WWW-Authenticate"] = "Bearer"
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _envelope(422, jsonable_encoder(exc.errors()), "VALIDATION_ERROR")

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler; keeps stack traces from leaking to clients."""
        logger.error(
            "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
        )
        return _envelope(500, "Internal server error", "INTERNAL_ERROR")
