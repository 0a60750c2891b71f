"""Post Store tests — round-trip, absence, uniqueness, serialization, recovery.

Invariants:
    - get_by_id(create(t, c)) returns exactly (t, c)
    - get_by_id on a well-formed, never-issued id returns None (not an error)
    - N concurrent creates return N distinct ids
    - Every SQL statement executes while the store lock is held
    - A failed operation raises StoreUnavailableError and leaves the store usable
"""

import asyncio
from uuid import UUID, uuid4

import pytest
from sqlalchemy import event, func, select

from minipost.core.domain_types import Post
from minipost.core.errors import MalformedRequestError, StoreUnavailableError
from minipost.infrastructure.post_store import PostStore
from minipost.models.post import PostRecord
from tests.conftest import MEMORY_URL


async def _count_rows(store: PostStore) -> int:
    async with store._exclusive_session("count") as db:
        return (await db.execute(select(func.count()).select_from(PostRecord))).scalar_one()


# --- Round-trip ---------------------------------------------------------------


async def test_create_returns_uuid4(store):
    post_id = await store.create("Hello", "World")
    assert isinstance(post_id, UUID)
    assert post_id.version == 4


async def test_round_trip_preserves_title_and_content(store):
    post_id = await store.create("Hello", "World")
    post = await store.get_by_id(post_id)
    assert post == Post(id=post_id, title="Hello", content="World")


@pytest.mark.parametrize("title,content", [
    ("T", ""),
    ("Ünïcødé ✓", "line one\nline two\n"),
    ("quotes ' \" and ; DROP TABLE posts", "{{ not a template }}"),
    ("x" * 5000, "y" * 20000),
])
async def test_round_trip_exact_text(store, title, content):
    post = await store.get_by_id(await store.create(title, content))
    assert (post.title, post.content) == (title, content)


async def test_get_by_id_accepts_text_id(store):
    post_id = await store.create("Hello", "World")
    post = await store.get_by_id(str(post_id))
    assert post.id == post_id


# --- Absence / malformed ------------------------------------------------------


async def test_unknown_id_is_absent(store):
    await store.create("Hello", "World")
    assert await store.get_by_id(uuid4()) is None


async def test_malformed_text_id_is_error(store):
    with pytest.raises(MalformedRequestError):
        await store.get_by_id("not-a-valid-id")


# --- Concurrency --------------------------------------------------------------


async def test_concurrent_creates_return_distinct_ids(store):
    ids = await asyncio.gather(*(store.create(f"t{i}", f"c{i}") for i in range(50)))
    assert len(set(ids)) == 50
    assert await _count_rows(store) == 50


async def test_concurrent_reads_and_writes_all_consistent(store):
    first = await store.create("first", "post")
    results = await asyncio.gather(
        *(store.create(f"t{i}", "c") for i in range(20)),
        *(store.get_by_id(first) for _ in range(20)),
    )
    created, read = results[:20], results[20:]
    assert len(set(created)) == 20
    assert all(p.title == "first" for p in read)


async def test_every_statement_runs_while_lock_is_held(store):
    held: list[bool] = []

    def record(conn, cursor, statement, parameters, context, executemany):
        held.append(store._lock.locked())

    sync_engine = store.engine.sync_engine
    event.listen(sync_engine, "before_cursor_execute", record)
    try:
        await asyncio.gather(
            *(store.create(f"t{i}", "c") for i in range(10)),
            *(store.get_by_id(uuid4()) for _ in range(10)),
        )
    finally:
        event.remove(sync_engine, "before_cursor_execute", record)

    assert held
    assert all(held)


async def test_operations_never_overlap(store, monkeypatch):
    active = 0
    peak = 0
    original = store._session_factory

    class _Tracking:
        def __init__(self, session):
            self._session = session

        def __getattr__(self, name):
            return getattr(self._session, name)

        async def close(self):
            nonlocal active
            active -= 1
            await self._session.close()

    def factory():
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        return _Tracking(original())

    monkeypatch.setattr(store, "_session_factory", factory)
    await asyncio.gather(
        *(store.create(f"t{i}", "c") for i in range(10)),
        *(store.get_by_id(uuid4()) for _ in range(10)),
    )
    assert peak == 1
    assert active == 0


# --- Failure and recovery -----------------------------------------------------


async def test_missing_schema_is_store_unavailable_then_recovers():
    s = PostStore(MEMORY_URL)
    try:
        with pytest.raises(StoreUnavailableError) as exc:
            await s.create("Hello", "World")
        assert exc.value.operation == "create"
        assert exc.value.http_status == 503

        await s.init_schema()
        post_id = await s.create("Hello", "World")
        assert (await s.get_by_id(post_id)).title == "Hello"
    finally:
        await s.close()


async def test_failed_insert_leaves_no_row(store, monkeypatch):
    existing = await store.create("Hello", "World")
    monkeypatch.setattr(
        "minipost.infrastructure.post_store.uuid4", lambda: existing,
    )

    with pytest.raises(StoreUnavailableError) as exc:
        await store.create("dup", "dup")
    assert exc.value.operation == "create"

    monkeypatch.undo()
    assert await _count_rows(store) == 1
    assert (await store.get_by_id(await store.create("next", "ok"))).title == "next"
    assert await _count_rows(store) == 2
    assert (await store.get_by_id(existing)).title == "Hello"


async def test_lock_released_after_failure():
    s = PostStore(MEMORY_URL)
    try:
        with pytest.raises(StoreUnavailableError):
            await s.get_by_id(uuid4())
        assert not s._lock.locked()
        await s.init_schema()
        assert await s.get_by_id(uuid4()) is None
    finally:
        await s.close()


async def test_health_check(store):
    assert await store.health_check() is True
