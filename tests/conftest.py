"""Root conftest — shared fixtures: in-memory store, stub collaborators, HTTP client.

Invariants:
    - Every test gets a fresh in-memory SQLite database behind a fresh PostStore
    - get_dispatcher dependency overridden so the client never needs the lifespan
    - StubRenderer is deterministic and pure (no jinja2)

Design Decisions:
    - SQLite in-memory with StaticPool: the single connection keeps the database alive
    - ASGITransport does not run lifespan; app.state.dispatcher stays unset unless overridden
"""

import os
from collections.abc import Mapping
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient

from minipost.api.routes.dispatch import get_dispatcher
from minipost.core.domain_types import Post, PostId
from minipost.core.errors import TemplateError
from minipost.infrastructure.post_store import PostStore
from minipost.infrastructure.renderer import JinjaRenderer
from minipost.main import app
from minipost.services.dispatcher import Dispatcher

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

MEMORY_URL = "sqlite+aiosqlite:///:memory:"


class StubRenderer:
    """Renders `name:key=value;...` — enough to assert which bindings arrived."""

    def __init__(self, known: tuple[str, ...] = ("hello", "post")):
        self.known = known
        self.calls: list[tuple[str, dict]] = []

    def render(self, template_name: str, bindings: Mapping[str, str]) -> str:
        self.calls.append((template_name, dict(bindings)))
        if template_name not in self.known:
            raise TemplateError(f"Unknown template '{template_name}'", template_name)
        body = ";".join(f"{k}={v}" for k, v in sorted(bindings.items()))
        return f"{template_name}:{body}"


class FakeStore:
    """Dict-backed PostRepository for dispatcher tests."""

    def __init__(self):
        self.posts: dict[PostId, Post] = {}

    async def create(self, title: str, content: str) -> PostId:
        post_id = PostId(uuid4())
        self.posts[post_id] = Post(id=post_id, title=title, content=content)
        return post_id

    async def get_by_id(self, post_id):
        return self.posts.get(post_id)


@pytest.fixture
async def store():
    s = PostStore(MEMORY_URL)
    await s.init_schema()
    yield s
    await s.close()


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def stub_renderer():
    return StubRenderer()


@pytest.fixture
async def client(store):
    """HTTP client over the real app, real store, real jinja2 renderer."""
    dispatcher = Dispatcher(store, JinjaRenderer())
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
