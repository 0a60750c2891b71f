"""Post Schemas — Pydantic models with field-level validation for form bodies.

Invariants:
    - PostCreate.title: non-empty; PostCreate.content: may be empty
    - GreetingForm.name: required, may be empty
    - Unknown form fields are ignored

Design Decisions:
    - Pydantic over hand-checks: the validation error names the offending field for free
    - No stripping: the stored title/content is byte-for-byte what the client sent
"""

from pydantic import BaseModel, Field


class PostCreate(BaseModel):
    """POST /posts form — title and content."""
    title: str = Field(min_length=1)
    content: str


class GreetingForm(BaseModel):
    """GET / form — the name to greet."""
    name: str
