"""Batch insights schema."""

from uuid import UUID

from pydantic import BaseModel, Field


class BatchInsightsRead(BaseModel):
    """Consumption and cost summary of a batch's current targets."""

    batch_id: UUID
    targeted_count: int
    category_targeted_count: int
    specific_targeted_count: int
    feeding_frequency_per_day: int
    daily_consumption_kg: float = Field(description="Effective rations times feedings per day")
    average_ration_kg: float | None = Field(default=None, description="Mean ration per feeding")
    cost_per_kg: float | None = Field(default=None, description="None when the catalog has no cost")
    daily_cost: float | None = None

    model_config = {"from_attributes": True}
