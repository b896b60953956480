"""Consumption batch schemas."""

import re
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from feed_engine.schemas.animal import AnimalSnapshotRead

FEEDING_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _check_feeding_times(times: list[str] | None) -> list[str] | None:
    if times is None:
        return None
    for value in times:
        if not FEEDING_TIME_PATTERN.match(value):
            raise ValueError(f"Feeding time must use HH:MM format: {value}")
    return times


class BatchCreate(BaseModel):
    """Payload for creating a consumption batch."""

    batch_name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    target_mode: str = Field(default="category", description="category, specific, or mixed")
    animal_category_ids: list[UUID] = Field(default_factory=list)
    feed_type_category_ids: list[UUID] = Field(default_factory=list)
    default_quantity_kg: Decimal = Field(default=Decimal("0"), ge=0, description="Base ration per feeding")
    feeding_frequency_per_day: int = Field(default=2, ge=1, le=6)
    feeding_times: list[str] = Field(default_factory=list, description="HH:MM feeding times")
    is_active: bool = True

    model_config = {"extra": "forbid", "str_strip_whitespace": True}

    @field_validator("feeding_times")
    @classmethod
    def validate_feeding_times(cls, v: list[str]) -> list[str]:
        return _check_feeding_times(v)


class BatchUpdate(BaseModel):
    """Partial update of a consumption batch."""

    batch_name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    target_mode: str | None = None
    animal_category_ids: list[UUID] | None = None
    feed_type_category_ids: list[UUID] | None = None
    default_quantity_kg: Decimal | None = Field(default=None, ge=0)
    feeding_frequency_per_day: int | None = Field(default=None, ge=1, le=6)
    feeding_times: list[str] | None = None
    is_active: bool | None = None

    model_config = {"extra": "forbid", "str_strip_whitespace": True}

    @field_validator("feeding_times")
    @classmethod
    def validate_feeding_times(cls, v: list[str] | None) -> list[str] | None:
        return _check_feeding_times(v)


class BatchRead(BaseModel):
    id: UUID
    farm_id: UUID
    batch_name: str
    description: str | None = None
    target_mode: str
    animal_category_ids: list[UUID] = Field(default_factory=list)
    feed_type_category_ids: list[UUID] = Field(default_factory=list)
    default_quantity_kg: Decimal
    feeding_frequency_per_day: int
    feeding_times: list[str] = Field(default_factory=list)
    is_active: bool
    is_preset: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class AddAnimalRequest(BaseModel):
    """Explicit link request.

    animal_id is taken as a string so a malformed id is reported as an
    invalid animal id rather than a generic body error.
    """

    animal_id: str = Field(description="Animal UUID")

    model_config = {"extra": "forbid"}


class BatchAnimalLinkRead(BaseModel):
    id: UUID
    batch_id: UUID
    animal_id: UUID
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class TargetedAnimalRead(BaseModel):
    """A targeted animal with its snapshot details and membership source.

    Snapshot fields are None when a linked animal is no longer in the registry.
    """

    animal_id: UUID
    source: str = Field(description="category or specific")
    tag_number: str | None = None
    name: str | None = None
    gender: str | None = None
    birth_date: date | None = None
    production_status: str | None = None
    status: str | None = None
    weight_kg: float | None = None


class BatchTargetsRead(BaseModel):
    batch_id: UUID
    target_mode: str
    total_targeted: int
    targeted: list[TargetedAnimalRead] = Field(default_factory=list)
    available: list[AnimalSnapshotRead] | None = Field(
        default=None,
        description="Active animals not targeted yet (only when requested)",
    )
