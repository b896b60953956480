"""Declarative base and timestamp columns for the feed engine tables.

The tables live in the farm application's database. Every row is scoped
by `farm_id`, directly or through its batch. The feed engine owns the
feed management tables; `animals` and `feed_types` are mapped read-only
from their owning services.
"""

from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    Shared metadata of the feed management tables and the read-only
    registry and catalog tables they reference.
    """
    pass


class TimestampMixin:
    """created_at set by the database on insert, updated_at on every update."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        onupdate=func.now(),
        nullable=True,
    )
