"""Animal category schemas."""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field

Gender = Literal["male", "female"]
ProductionStatus = Literal["calf", "heifer", "served", "lactating", "dry"]


class CategoryCharacteristics(BaseModel):
    """Characteristic flags; None or False leaves the flag unconstrained."""

    lactating: bool | None = None
    pregnant: bool | None = None
    breeding_male: bool | None = None
    growth_phase: bool | None = None

    model_config = {"extra": "forbid"}


class CategoryCreate(BaseModel):
    """Payload for creating an animal category."""

    name: str = Field(min_length=1, max_length=200, description="Category name, unique per farm")
    description: str | None = None
    min_age_days: int | None = Field(default=None, ge=0, description="Inclusive lower age bound")
    max_age_days: int | None = Field(default=None, ge=0, description="Inclusive upper age bound")
    gender: Gender | None = Field(default=None, description="Required gender (None = any)")
    production_status: ProductionStatus | None = None
    characteristics: CategoryCharacteristics = Field(default_factory=CategoryCharacteristics)
    sort_order: int | None = Field(default=None, description="Defaults to the next free position")

    model_config = {"extra": "forbid", "str_strip_whitespace": True}


class CategoryUpdate(BaseModel):
    """Partial update of an animal category; unset fields are left untouched."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    min_age_days: int | None = Field(default=None, ge=0)
    max_age_days: int | None = Field(default=None, ge=0)
    gender: Gender | None = None
    production_status: ProductionStatus | None = None
    characteristics: CategoryCharacteristics | None = None
    sort_order: int | None = None

    model_config = {"extra": "forbid", "str_strip_whitespace": True}


class CategoryRead(BaseModel):
    id: UUID
    farm_id: UUID
    name: str
    description: str | None = None
    min_age_days: int | None = None
    max_age_days: int | None = None
    gender: str | None = None
    production_status: str | None = None
    characteristics: dict[str, Any] = Field(default_factory=dict)
    is_default: bool = False
    sort_order: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
