"""Animal snapshot schemas (read-only views of the animal registry)."""

from datetime import date
from uuid import UUID

from pydantic import BaseModel, Field


class AnimalSnapshotRead(BaseModel):
    """Animal as seen by the category matcher."""

    animal_id: UUID
    tag_number: str
    name: str | None = None
    gender: str
    birth_date: date | None = None
    production_status: str | None = None
    status: str
    weight_kg: float | None = None
    lactating: bool = False
    pregnant: bool = False
    breeding_male: bool = False
    growth_phase: bool = False

    model_config = {"from_attributes": True}


class MatchingAnimalsRead(BaseModel):
    """Page of animals matching a category."""

    category_id: UUID
    animals: list[AnimalSnapshotRead] = Field(default_factory=list)
    total: int = Field(description="Total matches, independent of the page size")
    limit: int = Field(description="Page size applied")
