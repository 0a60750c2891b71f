"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from infrastructure — dependency arrows point inward only
    - Handlers reach persistence and templating only through these Protocol types
    - Implementations provided by the shell via dependency injection (Dispatcher.__init__)

Design Decisions:
    - Protocol over ABC: structural subtyping, tests pass plain stub objects
    - PostRepository is async (implementation does IO); Renderer is sync (pure, no IO)
"""

from collections.abc import Mapping
from typing import Protocol

from minipost.core.domain_types import Post, PostId


class PostRepository(Protocol):
    """Contract for post persistence — implemented by PostStore."""
    async def create(self, title: str, content: str) -> PostId: ...
    async def get_by_id(self, post_id: PostId | str) -> Post | None: ...


class Renderer(Protocol):
    """Contract for text templating — implemented by JinjaRenderer.

    Raises TemplateError for an unknown template or a missing binding.
    """
    def render(self, template_name: str, bindings: Mapping[str, str]) -> str: ...
