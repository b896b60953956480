"""Defaults service - seeds a farm with the default feed management data."""

from collections.abc import Callable
from uuid import UUID

from feed_engine.core.farm_defaults import FarmDefaults, load_farm_defaults
from feed_engine.core.resolver import TargetMode
from feed_engine.core.target_cache import ResultCache
from feed_engine.core.units import normalize_symbol
from feed_engine.infra.logging import get_logger
from feed_engine.models.animal_category import AnimalCategory
from feed_engine.models.batch_factor import ConsumptionBatchFactor
from feed_engine.models.consumption_batch import ConsumptionBatch
from feed_engine.models.weight_conversion import WeightConversion
from feed_engine.repositories.batches import BatchRepository
from feed_engine.repositories.categories import CategoryRepository
from feed_engine.repositories.conversions import ConversionRepository
from feed_engine.repositories.factors import FactorRepository
from feed_engine.schemas.farm import FarmDefaultsResult

logger = get_logger(__name__)


class DefaultsService:
    """Inserts the default categories, weight units, batch factors and preset
    batches for a farm.

    Running it again is safe: rows whose name (or unit symbol) already
    exists in the farm are left alone.
    """

    def __init__(
        self,
        categories: CategoryRepository,
        conversions: ConversionRepository,
        factors: FactorRepository,
        batches: BatchRepository,
        cache: ResultCache,
        loader: Callable[[], FarmDefaults] = load_farm_defaults,
    ) -> None:
        self.categories = categories
        self.conversions = conversions
        self.factors = factors
        self.batches = batches
        self.cache = cache
        self._loader = loader

    async def initialize_farm_defaults(self, farm_id: UUID) -> FarmDefaultsResult:
        defaults = self._loader()

        result = FarmDefaultsResult(
            version=defaults.version,
            categories_created=await self._seed_categories(farm_id, defaults),
            conversions_created=await self._seed_conversions(farm_id, defaults),
            factors_created=await self._seed_factors(farm_id, defaults),
            batches_created=await self._seed_batches(farm_id, defaults),
        )
        self.cache.invalidate_farm(farm_id)

        logger.info(
            "Farm defaults initialized",
            farm_id=str(farm_id),
            version=result.version,
            categories=result.categories_created,
            conversions=result.conversions_created,
            factors=result.factors_created,
            batches=result.batches_created,
        )
        return result

    async def _seed_categories(self, farm_id: UUID, defaults: FarmDefaults) -> int:
        existing = {c.name.strip().casefold() for c in await self.categories.list_all(farm_id)}
        sort_order = await self.categories.max_sort_order(farm_id) or 0
        created = 0

        for item in defaults.categories:
            if item.name.casefold() in existing:
                continue
            sort_order += 1
            await self.categories.add(
                AnimalCategory(
                    farm_id=farm_id,
                    name=item.name,
                    description=item.description,
                    min_age_days=item.min_age_days,
                    max_age_days=item.max_age_days,
                    gender=item.gender,
                    production_status=item.production_status,
                    characteristics=dict(item.characteristics),
                    is_default=True,
                    sort_order=sort_order,
                )
            )
            existing.add(item.name.casefold())
            created += 1

        return created

    async def _seed_conversions(self, farm_id: UUID, defaults: FarmDefaults) -> int:
        existing = {normalize_symbol(c.unit_symbol) for c in await self.conversions.list_all(farm_id)}
        created = 0

        for item in defaults.conversions:
            if normalize_symbol(item.unit_symbol) in existing:
                continue
            await self.conversions.add(
                WeightConversion(
                    farm_id=farm_id,
                    unit_name=item.unit_name,
                    unit_symbol=item.unit_symbol,
                    conversion_to_kg=item.conversion_to_kg,
                    description=item.description,
                    is_default=True,
                )
            )
            existing.add(normalize_symbol(item.unit_symbol))
            created += 1

        return created

    async def _seed_factors(self, farm_id: UUID, defaults: FarmDefaults) -> int:
        definitions = await self.factors.list_definitions(farm_id, include_inactive=True)
        existing = {f.factor_name.strip().casefold() for f in definitions}
        created = 0

        for item in defaults.factors:
            if item.factor_name.casefold() in existing:
                continue
            await self.factors.add_definition(
                ConsumptionBatchFactor(
                    farm_id=farm_id,
                    factor_name=item.factor_name,
                    factor_type=item.factor_type,
                    description=item.description,
                    is_active=True,
                )
            )
            existing.add(item.factor_name.casefold())
            created += 1

        return created

    async def _seed_batches(self, farm_id: UUID, defaults: FarmDefaults) -> int:
        """Create preset batches; runs after categories so their names resolve."""
        existing = {b.batch_name.strip().casefold() for b in await self.batches.list_all(farm_id)}
        category_ids = {c.name.strip().casefold(): c.id for c in await self.categories.list_all(farm_id)}
        created = 0

        for item in defaults.batches:
            if item.batch_name.casefold() in existing:
                continue
            await self.batches.add(
                ConsumptionBatch(
                    farm_id=farm_id,
                    batch_name=item.batch_name,
                    description=item.description,
                    target_mode=TargetMode.parse(item.target_mode).value,
                    animal_category_ids=[category_ids[name.casefold()] for name in item.animal_categories],
                    feed_type_category_ids=[],
                    default_quantity_kg=item.default_quantity_kg,
                    feeding_frequency_per_day=item.feeding_frequency_per_day,
                    feeding_times=list(item.feeding_times),
                    is_active=True,
                    is_preset=True,
                )
            )
            existing.add(item.batch_name.casefold())
            created += 1

        return created
