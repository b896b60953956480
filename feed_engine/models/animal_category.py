"""AnimalCategory model - rule-based, non-exclusive animal classification."""

import uuid
from typing import Any

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from feed_engine.models.base import Base, TimestampMixin


class AnimalCategory(Base, TimestampMixin):
    """Animal category used to target feeding batches.

    Maps to the `animal_categories` table. Membership is never stored:
    animals are matched against the criteria columns on every read.

    `characteristics` holds the optional boolean flags `lactating`,
    `pregnant`, `breeding_male` and `growth_phase`.
    """

    __tablename__ = "animal_categories"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    farm_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    min_age_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_age_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(10), nullable=True)
    production_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    characteristics: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False, default=dict)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    sort_order: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        return f"<AnimalCategory(id={self.id}, name='{self.name}')>"
