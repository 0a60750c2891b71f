"""Post Store — the single persistent connection and the operations serialized against it.

Invariants:
    - Exactly one DB-API connection per store (StaticPool); nothing outside this module touches it
    - Every operation holds self._lock for its whole persistence step (mutually exclusive,
      not reentrant) — operations are totally ordered, reads and writes alike
    - create() is all-or-nothing: commit or rollback, never a partial row
    - Every SQLAlchemy/driver failure surfaces as StoreUnavailableError
    - A failed operation leaves the store usable: the next one opens a fresh session

Design Decisions:
    - One asyncio.Lock, no read/write split: simplicity over throughput (known bottleneck)
    - Session created and closed inside the lock: no ORM state survives an operation
    - get_by_id returns a frozen Post, never the ORM row (no lazy loads after release)
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from uuid import UUID, uuid4

from sqlalchemy import text
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import StaticPool

from minipost.core.domain_types import Post, PostId
from minipost.core.errors import StoreUnavailableError
from minipost.core.parse_request import parse_post_id
from minipost.db.base import Base
from minipost.models.post import PostRecord

logger = logging.getLogger(__name__)


class PostStore:
    """Owns the persistence handle; exposes create/get_by_id with exclusive access."""

    def __init__(self, database_url: str):
        self.engine = create_async_engine(database_url, poolclass=StaticPool)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def _exclusive_session(
        self, operation: str,
    ) -> AsyncGenerator[AsyncSession, None]:
        """Acquire the lock, open a session, map failures, always release."""
        async with self._lock:
            session = self._session_factory()
            try:
                yield session
            except IntegrityError as e:
                await _rollback(session)
                logger.error(f"DB integrity error: {e}", extra={"operation": operation})
                raise StoreUnavailableError(
                    "Integrity constraint violated", operation,
                ) from e
            except OperationalError as e:
                await _rollback(session)
                logger.error(f"DB operational error: {e}", extra={"operation": operation})
                raise StoreUnavailableError(
                    "Connection or operational error", operation,
                ) from e
            except DBAPIError as e:
                await _rollback(session)
                logger.error(f"DB driver error: {e}", extra={"operation": operation})
                raise StoreUnavailableError("Database driver error", operation) from e
            except SQLAlchemyError as e:
                await _rollback(session)
                logger.error(f"SQLAlchemy error: {e}", extra={"operation": operation})
                raise StoreUnavailableError(
                    "Database operation failed", operation,
                ) from e
            except OSError as e:
                logger.error(f"DB unreachable: {e}", extra={"operation": operation})
                raise StoreUnavailableError("Database unreachable", operation) from e
            finally:
                await session.close()

    async def init_schema(self) -> None:
        """Create the posts table if it does not exist yet."""
        async with self._exclusive_session("init_schema") as db:
            conn = await db.connection()
            await conn.run_sync(Base.metadata.create_all)
            await db.commit()

    async def create(self, title: str, content: str) -> PostId:
        """Mint a fresh id, persist (id, title, content), return the id."""
        post_id = PostId(uuid4())
        async with self._exclusive_session("create") as db:
            db.add(PostRecord(id=post_id, title=title, content=content))
            await db.commit()
        logger.info("Post stored", extra={"post_id": str(post_id)})
        return post_id

    async def get_by_id(self, post_id: PostId | str) -> Post | None:
        """Return the post with this id, or None. Text ids are parsed first."""
        if not isinstance(post_id, UUID):
            post_id = parse_post_id(post_id)
        async with self._exclusive_session("get_by_id") as db:
            row = await db.get(PostRecord, post_id)
            if row is None:
                return None
            return Post(id=PostId(row.id), title=row.title, content=row.content)

    async def health_check(self) -> bool:
        """Check database connectivity (startup log line)."""
        try:
            async with self._exclusive_session("health_check") as db:
                await db.execute(text("SELECT 1"))
            return True
        except StoreUnavailableError as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def close(self) -> None:
        async with self._lock:
            await self.engine.dispose()


async def _rollback(session: AsyncSession) -> None:
    """Roll back; a broken connection may refuse even that, which is logged."""
    try:
        await session.rollback()
    except SQLAlchemyError as e:
        logger.warning(f"DB rollback failed: {e}")
