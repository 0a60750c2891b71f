"""Dispatcher — explicit routing from (method, path) to a post handler.

Invariants:
    - Route table is an ordered tuple; first match wins; every mapping visible in one place
    - dispatch() is total over (method, path): no match resolves to not_found (404, empty body)
    - dispatch() never raises: PostServerError → its envelope, anything else → INTERNAL_ERROR
    - Method match is exact; path match is exact or literal-prefix per route

Design Decisions:
    - Explicit table over decorators/auto-discovery: adding a route requires editing _build_routes
    - Error conversion lives here, not in handlers: one boundary, one log line per failure
    - A failing request only affects itself; store and renderer are left usable
"""

import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

from minipost.core.domain_types import (
    APPLICATION_JSON, IncomingRequest, Response,
)
from minipost.core.errors import ErrorSeverity, PostServerError
from minipost.core.protocols import PostRepository, Renderer
from minipost.services.handle_posts import POSTS_PREFIX, PostHandlers

logger = logging.getLogger(__name__)

Handler = Callable[[IncomingRequest], Awaitable[Response]]


class PathMatch(str, Enum):
    EXACT = "exact"
    PREFIX = "prefix"


@dataclass(frozen=True)
class Route:
    method: str
    pattern: str
    match: PathMatch
    handler: Handler

    def matches(self, method: str, path: str) -> bool:
        if method != self.method:
            return False
        if self.match is PathMatch.EXACT:
            return path == self.pattern
        return path.startswith(self.pattern)


class Dispatcher:
    """Routes requests to handlers. Shares one store and one renderer across all requests."""

    def __init__(self, store: PostRepository, renderer: Renderer):
        self._handlers = PostHandlers(store, renderer)
        self.routes = self._build_routes()

    def _build_routes(self) -> tuple[Route, ...]:
        h = self._handlers
        return (
            Route("GET", "/", PathMatch.EXACT, h.render_greeting),
            Route("POST", "/posts", PathMatch.EXACT, h.create_post),
            Route("GET", POSTS_PREFIX, PathMatch.PREFIX, h.get_post_by_id),
        )

    def resolve(self, method: str, path: str) -> Handler:
        """First matching route's handler, or not_found."""
        for route in self.routes:
            if route.matches(method, path):
                return route.handler
        return self._handlers.not_found

    async def dispatch(self, method: str, path: str, body: bytes = b"") -> Response:
        request = IncomingRequest(method=method, path=path, body=body)
        handler = self.resolve(method, path)
        log_extra = {"method": method, "path": path}
        try:
            response = await handler(request)
        except PostServerError as e:
            _log_handled_error(e, log_extra)
            return _error_response(e.http_status, e.to_response())
        except Exception as e:
            logger.error(
                f"Unhandled exception on {method} {path}: {e}",
                exc_info=True, extra=log_extra,
            )
            return _error_response(500, {
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            })
        logger.debug(
            "Request handled", extra={**log_extra, "status": response.status},
        )
        return response


def _log_handled_error(error: PostServerError, extra: dict) -> None:
    extra = {**extra, "error_code": error.code, "status": error.http_status}
    if error.http_status < 500:
        logger.warning(f"{error.code}: {error.message}", extra=extra)
    else:
        logger.error(f"{error.code}: {error.message}", extra=extra)


def _error_response(status: int, content: dict) -> Response:
    return Response(status, json.dumps(content), APPLICATION_JSON)
