"""Insights service - consumption and cost summary of a batch."""

from uuid import UUID

from feed_engine.core.errors import DependencyError
from feed_engine.core.insights import BatchInsights, compute_insights
from feed_engine.core.target_cache import ResultCache
from feed_engine.infra.logging import get_logger
from feed_engine.repositories.feed_costs import FeedCostProvider
from feed_engine.services.batch_service import BatchService
from feed_engine.services.factor_service import FactorService

logger = get_logger(__name__)

INSIGHTS = "insights"


class InsightsService:
    """Runs targets, multipliers and feed cost through the insights aggregator."""

    def __init__(
        self,
        batch_service: BatchService,
        factor_service: FactorService,
        feed_costs: FeedCostProvider,
        cache: ResultCache,
    ) -> None:
        self.batch_service = batch_service
        self.factor_service = factor_service
        self.feed_costs = feed_costs
        self.cache = cache

    async def get_batch_insights(self, farm_id: UUID, batch_id: UUID) -> BatchInsights:
        """Insights for a batch.

        A feed catalog outage only removes the cost figures; the
        consumption figures are still returned.

        Raises:
            NotFoundError: If the batch does not exist in this farm
        """
        cached = self.cache.get(farm_id, batch_id, INSIGHTS)
        if cached is not None:
            return cached

        version = self.cache.version(farm_id, batch_id)
        batch = await self.batch_service.get_batch(farm_id, batch_id)
        targets = await self.batch_service.resolve_targets(farm_id, batch)
        multipliers = await self.factor_service.multipliers(batch.id)

        cost_degraded = False
        try:
            cost_per_kg = await self.feed_costs.cost_per_kg(farm_id, batch.feed_type_category_ids)
        except DependencyError as e:
            logger.warning(
                "Feed cost unavailable, insights returned without cost",
                farm_id=str(farm_id),
                batch_id=str(batch_id),
                error=e.message,
            )
            cost_per_kg = None
            cost_degraded = True

        insights = compute_insights(
            batch_id=batch.id,
            default_quantity_kg=batch.default_quantity_kg,
            feeding_frequency_per_day=batch.feeding_frequency_per_day,
            targets=targets,
            multipliers=multipliers,
            cost_per_kg=cost_per_kg,
        )
        if not cost_degraded:
            self.cache.set(farm_id, batch_id, INSIGHTS, insights, version=version)

        logger.info(
            "Batch insights computed",
            farm_id=str(farm_id),
            batch_id=str(batch_id),
            targeted=insights.targeted_count,
            daily_consumption_kg=round(insights.daily_consumption_kg, 3),
            has_cost=insights.daily_cost is not None,
        )
        return insights
