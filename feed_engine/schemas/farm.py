"""Farm-level operation schemas."""

from pydantic import BaseModel, Field


class FarmDefaultsResult(BaseModel):
    """Rows inserted by a defaults initialization (existing rows are skipped)."""

    version: str = Field(description="Version of the defaults file applied")
    categories_created: int = 0
    conversions_created: int = 0
    factors_created: int = 0
    batches_created: int = 0

    @property
    def total_created(self) -> int:
        return self.categories_created + self.conversions_created + self.factors_created + self.batches_created
