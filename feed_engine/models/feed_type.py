"""FeedType model - read-only view of the feed catalog."""

import uuid
from decimal import Decimal

from sqlalchemy import Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from feed_engine.models.base import Base, TimestampMixin


class FeedType(Base, TimestampMixin):
    """Feed type from the farm's catalog.

    Maps to the existing `feed_types` table. Only the columns needed to
    price a batch's ration are mapped.
    """

    __tablename__ = "feed_types"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    farm_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True, index=True)
    typical_cost_per_kg: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)

    def __repr__(self) -> str:
        return f"<FeedType(id={self.id}, name='{self.name}')>"
