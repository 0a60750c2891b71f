"""Error Handlers — last-resort exception handlers for the HTTP shell.

Invariants:
    - PostServerError → structured JSON with error code, message, severity
    - Routing misses raised by Starlette (404/405) → 404 with empty body, same as the dispatcher
    - Exception (catch-all) → never leaks internal details

Design Decisions:
    - The dispatcher already converts handler failures; these only cover the shell itself
      (dispatcher missing, body unreadable, methods outside the catch-all route)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from minipost.core.errors import PostServerError, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_post_server_error_handler(app)
    _register_http_exception_handler(app)
    _register_generic_error_handler(app)


def _register_post_server_error_handler(app: FastAPI) -> None:
    """Register minipost domain/infrastructure error handler."""

    @app.exception_handler(PostServerError)
    async def post_server_error_handler(request: Request, exc: PostServerError):
        logger.error(
            f"PostServerError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_http_exception_handler(app: FastAPI) -> None:
    """Register Starlette HTTP exception handler."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException,
    ):
        if exc.status_code in (
            status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED,
        ):
            return Response(status_code=status.HTTP_404_NOT_FOUND)
        return Response(status_code=exc.status_code, headers=exc.headers)


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )
