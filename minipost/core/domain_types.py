"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - PostId wraps UUID — never pass bare strings past the request boundary
    - Post is frozen: handlers read it, nobody mutates it
    - Response is the only thing a handler hands back to the dispatcher

Design Decisions:
    - NewType over dataclass wrapper for ids: zero runtime cost, full type-checker support
    - Transport-neutral IncomingRequest/Response: core never imports FastAPI/Starlette
"""

from dataclasses import dataclass
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

PostId = NewType("PostId", UUID)


# ─── Records ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class Post:
    """A stored post, detached from the persistence session."""
    id: PostId
    title: str
    content: str


# ─── Transport ───────────────────────────────────────────────────

TEXT_PLAIN = "text/plain; charset=utf-8"
APPLICATION_JSON = "application/json"


@dataclass(frozen=True)
class IncomingRequest:
    method: str
    path: str
    body: bytes = b""


@dataclass(frozen=True)
class Response:
    status: int
    body: str = ""
    media_type: str = TEXT_PLAIN

    @classmethod
    def ok(cls, body: str) -> "Response":
        return cls(200, body)

    @classmethod
    def not_found(cls) -> "Response":
        """404 with an empty body."""
        return cls(404)
