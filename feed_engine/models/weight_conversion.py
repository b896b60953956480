"""WeightConversion model - farm-scoped unit to kilogram multipliers."""

import uuid
from decimal import Decimal

from sqlalchemy import Boolean, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from feed_engine.models.base import Base, TimestampMixin


class WeightConversion(Base, TimestampMixin):
    """Weight unit definition.

    Maps to the `weight_conversions` table. `unit_symbol` is unique per
    farm ignoring case; that rule is enforced by the conversion service.
    """

    __tablename__ = "weight_conversions"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    farm_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    unit_name: Mapped[str] = mapped_column(String(100), nullable=False)
    unit_symbol: Mapped[str] = mapped_column(String(20), nullable=False)
    conversion_to_kg: Mapped[Decimal] = mapped_column(Numeric(14, 6), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<WeightConversion(id={self.id}, unit_symbol='{self.unit_symbol}')>"
