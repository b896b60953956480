"""Weight conversion schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field


class ConversionCreate(BaseModel):
    unit_name: str = Field(min_length=1, max_length=100)
    unit_symbol: str = Field(min_length=1, max_length=20)
    conversion_to_kg: Decimal = Field(description="Kilograms per one unit, must be > 0")
    description: str | None = None

    model_config = {"extra": "forbid", "str_strip_whitespace": True}


class ConversionUpdate(BaseModel):
    unit_name: str | None = Field(default=None, min_length=1, max_length=100)
    unit_symbol: str | None = Field(default=None, min_length=1, max_length=20)
    conversion_to_kg: Decimal | None = None
    description: str | None = None

    model_config = {"extra": "forbid", "str_strip_whitespace": True}


class ConversionRead(BaseModel):
    id: UUID
    farm_id: UUID
    unit_name: str
    unit_symbol: str
    conversion_to_kg: Decimal
    description: str | None = None
    is_default: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class ConvertRequest(BaseModel):
    quantity: float = Field(description="Quantity expressed in unit_symbol")
    unit_symbol: str = Field(min_length=1, max_length=20)

    model_config = {"extra": "forbid", "str_strip_whitespace": True}


class ConvertResponse(BaseModel):
    quantity: float
    unit_symbol: str
    quantity_kg: float
