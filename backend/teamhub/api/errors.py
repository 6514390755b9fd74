"""
Global error handlers.

Domain errors are translated to their status code here and nowhere else.
Unexpected exceptions are logged with a traceback and answered with a
generic 500 so internals never reach the client.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from teamhub.core.exceptions import TeamHubError

logger = logging.getLogger(__name__)


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(TeamHubError)
    async def domain_error_handler(request: Request, exc: TeamHubError) -> JSONResponse:
        logger.warning("HTTP %d: %s | %s %s", exc.status_code, exc.detail, request.method, request.url.path)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        detail = _format_validation_errors(exc)
        logger.warning("HTTP 400: %s | %s %s", detail, request.method, request.url.path)
        return JSONResponse(status_code=400, content={"detail": detail})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled exception | %s %s | type=%s", request.method, request.url.path, type(exc).__name__
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "An unexpected error occurred. Please try again later."},
        )
