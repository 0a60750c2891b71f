"""Post ORM — the only persisted table.

Invariants:
    - id is UUID primary key, minted by PostStore (never by the database)
    - title is non-nullable, non-empty text; content is non-nullable, possibly empty
    - Rows are insert-only: no update/delete path exists

Design Decisions:
    - Portable UUID column: stored natively on PostgreSQL, as CHAR(32) on SQLite
"""

import uuid

from sqlalchemy import Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from minipost.db.base import Base


class PostRecord(Base):
    """Persisted post row."""
    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
