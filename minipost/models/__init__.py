"""ORM Models — SQLAlchemy declarative models.

Design Decisions:
    - All models imported here so Base.metadata is complete before create_all runs
"""

from minipost.models.post import PostRecord  # noqa: F401
