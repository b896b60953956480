"""ConsumptionBatch and BatchAnimalLink models."""

import uuid
from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column

from feed_engine.models.base import Base, TimestampMixin


class ConsumptionBatch(Base, TimestampMixin):
    """Feeding group with a targeting mode and a base ration.

    Maps to the `consumption_batches` table.
    """

    __tablename__ = "consumption_batches"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    farm_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    batch_name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    target_mode: Mapped[str] = mapped_column(String(20), nullable=False, default="category")
    animal_category_ids: Mapped[list[uuid.UUID]] = mapped_column(
        ARRAY(UUID(as_uuid=True)),
        nullable=False,
        default=list,
    )
    feed_type_category_ids: Mapped[list[uuid.UUID]] = mapped_column(
        ARRAY(UUID(as_uuid=True)),
        nullable=False,
        default=list,
    )
    default_quantity_kg: Mapped[Decimal] = mapped_column(
        Numeric(10, 3),
        nullable=False,
        default=Decimal("0"),
    )
    feeding_frequency_per_day: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    feeding_times: Mapped[list[str]] = mapped_column(ARRAY(String(5)), nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    is_preset: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<ConsumptionBatch(id={self.id}, batch_name='{self.batch_name}', target_mode='{self.target_mode}')>"


class BatchAnimalLink(Base, TimestampMixin):
    """Explicit (specific-mode) membership of an animal in a batch.

    Maps to the `consumption_batch_animals` table.
    """

    __tablename__ = "consumption_batch_animals"
    __table_args__ = (
        UniqueConstraint("batch_id", "animal_id", name="uq_consumption_batch_animal"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    batch_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("consumption_batches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    animal_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<BatchAnimalLink(batch_id={self.batch_id}, animal_id={self.animal_id})>"
