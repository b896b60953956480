"""Batch factor catalogue and per-animal factor value schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, StrictFloat, StrictInt


class BatchFactorCreate(BaseModel):
    factor_name: str = Field(min_length=1, max_length=200)
    factor_type: str = Field(default="custom", min_length=1, max_length=50)
    description: str | None = None

    model_config = {"extra": "forbid", "str_strip_whitespace": True}


class BatchFactorUpdate(BaseModel):
    """Partial update of a factor definition; is_active=False deactivates it."""

    factor_name: str | None = Field(default=None, min_length=1, max_length=200)
    factor_type: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = None
    is_active: bool | None = None

    model_config = {"extra": "forbid", "str_strip_whitespace": True}


class BatchFactorRead(BaseModel):
    id: UUID
    farm_id: UUID
    factor_name: str
    factor_type: str
    description: str | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class FactorUpdate(BaseModel):
    """One factor value to write.

    Fields are optional here so that a missing field is reported with the
    offending entry's position instead of as a generic body error.
    Booleans are rejected rather than read as 1 or 0.
    """

    animal_id: str | None = None
    factor_id: str | None = None
    factor_value: str | StrictInt | StrictFloat | None = None

    model_config = {"extra": "forbid"}


class FactorUpdateRequest(BaseModel):
    factors: list[FactorUpdate] = Field(default_factory=list)

    model_config = {"extra": "forbid"}


class AnimalBatchFactorRead(BaseModel):
    id: UUID
    batch_id: UUID
    animal_id: UUID
    factor_id: UUID
    factor_value: str
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
