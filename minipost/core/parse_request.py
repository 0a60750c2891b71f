"""Request Parsing — total functions from raw request parts to typed values.

Invariants:
    - Every function either returns a value or raises MalformedRequestError (never anything else)
    - Bodies are strict UTF-8; invalid bytes or invalid %-escapes are malformed, not replaced
    - Repeated form fields: the FIRST occurrence wins
    - parse_post_id accepts four ASCII spellings only: 32 hex, hyphenated 8-4-4-4-12,
      urn:uuid:<hyphenated>, {<hyphenated>}

Design Decisions:
    - urllib.parse over a form library: the body is plain x-www-form-urlencoded, no multipart
    - Validation delegated to pydantic schemas so field errors stay declarative
"""

import re
from typing import TypeVar
from urllib.parse import parse_qsl
from uuid import UUID

from pydantic import BaseModel, ValidationError

from minipost.core.domain_types import PostId
from minipost.core.errors import MalformedRequestError

FormT = TypeVar("FormT", bound=BaseModel)

_HYPHENATED = (
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)
# simple, hyphenated, urn:uuid:-prefixed, braced
_POST_ID_PATTERN = re.compile(
    rf"[0-9a-fA-F]{{32}}|{_HYPHENATED}|urn:uuid:{_HYPHENATED}|\{{{_HYPHENATED}\}}",
    re.ASCII,
)


def decode_form(body: bytes) -> dict[str, str]:
    """Decode an x-www-form-urlencoded body into a field → value mapping."""
    try:
        text = body.decode("utf-8")
        pairs = parse_qsl(
            text, keep_blank_values=True, encoding="utf-8", errors="strict",
        )
    except UnicodeDecodeError as e:
        raise MalformedRequestError(
            f"Request body is not valid UTF-8: {e.reason}", "body",
        ) from e
    fields: dict[str, str] = {}
    for key, value in pairs:
        fields.setdefault(key, value)
    return fields


def parse_form(body: bytes, schema: type[FormT]) -> FormT:
    """Decode body and validate it against a pydantic form schema."""
    fields = decode_form(body)
    try:
        return schema.model_validate(fields)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(loc) for loc in first["loc"]) or "body"
        if first["type"] == "missing":
            message = f"Missing required form field '{field}'"
        else:
            message = f"Invalid form field '{field}': {first['msg']}"
        raise MalformedRequestError(message, field) from e


def parse_post_id(text: str) -> PostId:
    """Parse the textual id of a post. Total: text → PostId | MalformedRequestError."""
    if not isinstance(text, str) or not _POST_ID_PATTERN.fullmatch(text):
        raise MalformedRequestError(f"'{text}' is not a valid post id", "id")
    return PostId(UUID(text))


def format_post_id(post_id: PostId) -> str:
    """Canonical text form: lower-case, hyphenated."""
    return str(post_id)
