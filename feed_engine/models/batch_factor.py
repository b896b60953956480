"""Consumption batch factor models."""

import uuid

from sqlalchemy import Boolean, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from feed_engine.models.base import Base, TimestampMixin


class ConsumptionBatchFactor(Base, TimestampMixin):
    """Named ration multiplier definition (e.g. body condition, lactation stage).

    Maps to the `consumption_batch_factors` table.
    """

    __tablename__ = "consumption_batch_factors"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    farm_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    factor_name: Mapped[str] = mapped_column(String(200), nullable=False)
    factor_type: Mapped[str] = mapped_column(String(50), nullable=False, default="custom")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<ConsumptionBatchFactor(id={self.id}, factor_name='{self.factor_name}')>"


class AnimalBatchFactor(Base, TimestampMixin):
    """Per-animal, per-batch value of a factor.

    Maps to the `animal_batch_factors` table. `factor_value` is kept as
    the string the user entered and read as a decimal multiplier.
    """

    __tablename__ = "animal_batch_factors"
    __table_args__ = (
        UniqueConstraint("batch_id", "animal_id", "factor_id", name="uq_animal_batch_factor"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    farm_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    batch_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("consumption_batches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    animal_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    factor_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("consumption_batch_factors.id", ondelete="CASCADE"),
        nullable=False,
    )
    factor_value: Mapped[str] = mapped_column(String(50), nullable=False)

    def __repr__(self) -> str:
        return (
            f"<AnimalBatchFactor(batch_id={self.batch_id}, animal_id={self.animal_id}, "
            f"factor_id={self.factor_id}, factor_value='{self.factor_value}')>"
        )
