"""Dispatch Route — hands every HTTP request to the Dispatcher.

Invariants:
    - Exactly one catch-all route: FastAPI never decides which handler runs
    - The body is read fully before dispatching; an unreadable body is a MalformedRequest
    - Query string is not part of the dispatched path

Design Decisions:
    - Dispatcher obtained via Depends(get_dispatcher): tests override it like any dependency
    - Dispatcher lives on app.state (built in lifespan), not at module import time
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from starlette.requests import ClientDisconnect

from minipost.core.errors import MalformedRequestError, StoreUnavailableError
from minipost.services.dispatcher import Dispatcher

logger = logging.getLogger(__name__)
router = APIRouter()

ROUTED_METHODS = [
    "GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS",
]


def get_dispatcher(request: Request) -> Dispatcher:
    """FastAPI dependency for the shared dispatcher."""
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if dispatcher is None:
        raise StoreUnavailableError("Dispatcher not initialized", "startup")
    return dispatcher


@router.api_route(
    "/{path:path}", methods=ROUTED_METHODS, include_in_schema=False,
)
async def dispatch_request(
    request: Request, dispatcher: Dispatcher = Depends(get_dispatcher),
):
    try:
        body = await request.body()
    except ClientDisconnect as e:
        raise MalformedRequestError(
            "Request body could not be read", "body",
        ) from e
    result = await dispatcher.dispatch(request.method, request.url.path, body)
    return Response(
        content=result.body,
        status_code=result.status,
        media_type=result.media_type,
    )
