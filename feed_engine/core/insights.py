"""Insights aggregator - batch-level consumption and cost estimates."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from feed_engine.core.factors import NEUTRAL_MULTIPLIER, effective_ration_kg
from feed_engine.core.resolver import MembershipSource, TargetedAnimal


@dataclass(frozen=True)
class BatchInsights:
    """Aggregated consumption summary of a batch's current targets.

    Attributes:
        targeted_count: Number of targeted animals
        category_targeted_count: Targets coming from category rules
        specific_targeted_count: Targets coming from explicit links only
        feeding_frequency_per_day: Feedings per day used in the totals
        daily_consumption_kg: Sum of effective rations times frequency
        average_ration_kg: Mean effective ration per feeding (None if empty)
        cost_per_kg: Catalog cost, None when unknown
        daily_cost: daily_consumption_kg * cost_per_kg, None when cost unknown
    """

    batch_id: UUID
    targeted_count: int
    category_targeted_count: int
    specific_targeted_count: int
    feeding_frequency_per_day: int
    daily_consumption_kg: float
    average_ration_kg: float | None
    cost_per_kg: float | None
    daily_cost: float | None


def compute_insights(
    batch_id: UUID,
    default_quantity_kg: Decimal | float,
    feeding_frequency_per_day: int,
    targets: Sequence[TargetedAnimal],
    multipliers: Mapping[UUID, float],
    cost_per_kg: Decimal | float | None,
) -> BatchInsights:
    """Roll targeted animals up into batch insights.

    Args:
        batch_id: Batch the insights describe
        default_quantity_kg: Base ration per animal per feeding
        feeding_frequency_per_day: Feedings per day
        targets: Resolved targets of the batch
        multipliers: Effective multiplier per animal (missing = 1.0)
        cost_per_kg: Feed cost per kg, or None if unknown

    Returns:
        BatchInsights
    """
    rations = [
        effective_ration_kg(default_quantity_kg, multipliers.get(t.animal_id, NEUTRAL_MULTIPLIER))
        for t in targets
    ]
    per_feeding_kg = sum(rations)
    daily_consumption_kg = per_feeding_kg * feeding_frequency_per_day

    category_count = sum(1 for t in targets if t.source is MembershipSource.CATEGORY)

    cost = float(cost_per_kg) if cost_per_kg is not None else None
    daily_cost = daily_consumption_kg * cost if cost is not None else None

    return BatchInsights(
        batch_id=batch_id,
        targeted_count=len(targets),
        category_targeted_count=category_count,
        specific_targeted_count=len(targets) - category_count,
        feeding_frequency_per_day=feeding_frequency_per_day,
        daily_consumption_kg=daily_consumption_kg,
        average_ration_kg=per_feeding_kg / len(rations) if rations else None,
        cost_per_kg=cost,
        daily_cost=daily_cost,
    )
