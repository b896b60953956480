"""Factor service - factor catalogue and per-animal factor values.

Factor value updates are all-or-nothing: every entry is validated
before the first row is written.
"""

from collections import defaultdict
from uuid import UUID

from feed_engine.core.errors import NotFoundError, ValidationError
from feed_engine.core.factors import effective_multiplier, parse_factor_value
from feed_engine.core.identifiers import parse_animal_id, parse_uuid
from feed_engine.core.target_cache import ResultCache
from feed_engine.infra.logging import get_logger
from feed_engine.models.batch_factor import AnimalBatchFactor, ConsumptionBatchFactor
from feed_engine.repositories.animals import AnimalSnapshotReader
from feed_engine.repositories.batches import BatchRepository
from feed_engine.repositories.factors import FactorRepository, FactorValueEntry
from feed_engine.schemas.factor import BatchFactorCreate, BatchFactorUpdate, FactorUpdate

logger = get_logger(__name__)

REQUIRED_ENTRY_FIELDS = ("animal_id", "factor_id", "factor_value")


class FactorService:
    """Batch factor definitions and the values applied to animals in batches."""

    def __init__(
        self,
        factors: FactorRepository,
        batches: BatchRepository,
        animals: AnimalSnapshotReader,
        cache: ResultCache,
    ) -> None:
        self.factors = factors
        self.batches = batches
        self.animals = animals
        self.cache = cache

    # =========================================================================
    # Factor catalogue
    # =========================================================================

    async def get_batch_factors(self, farm_id: UUID) -> list[ConsumptionBatchFactor]:
        return await self.factors.list_definitions(farm_id)

    async def create_batch_factor(self, farm_id: UUID, data: BatchFactorCreate) -> ConsumptionBatchFactor:
        factor = await self.factors.add_definition(
            ConsumptionBatchFactor(
                farm_id=farm_id,
                factor_name=data.factor_name,
                factor_type=data.factor_type,
                description=data.description,
                is_active=True,
            )
        )
        logger.info(
            "Batch factor created",
            farm_id=str(farm_id),
            factor_id=str(factor.id),
            factor_type=factor.factor_type,
        )
        return factor

    async def update_batch_factor(
        self,
        farm_id: UUID,
        factor_id: UUID,
        data: BatchFactorUpdate,
    ) -> ConsumptionBatchFactor:
        """Edit or deactivate a factor definition.

        Deactivated factors stop contributing to every batch of the farm,
        so all cached insights of the farm are dropped.
        """
        factor = await self.factors.get_definition(farm_id, factor_id)
        if factor is None:
            raise NotFoundError("Batch factor not found", factor_id=str(factor_id))

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field != "description":
                continue
            setattr(factor, field, value)

        factor = await self.factors.save_definition(factor)
        self.cache.invalidate_farm(farm_id)

        logger.info(
            "Batch factor updated",
            farm_id=str(farm_id),
            factor_id=str(factor_id),
            is_active=factor.is_active,
        )
        return factor

    # =========================================================================
    # Factor values
    # =========================================================================

    async def get_animal_batch_factors(
        self,
        farm_id: UUID,
        batch_id: UUID,
        animal_id: str | UUID | None = None,
    ) -> list[AnimalBatchFactor]:
        parsed_animal = parse_animal_id(animal_id) if animal_id is not None else None
        await self._get_batch(farm_id, batch_id)
        return await self.factors.list_values(batch_id, parsed_animal)

    async def update_animal_batch_factors(
        self,
        farm_id: UUID,
        batch_id: UUID,
        updates: list[FactorUpdate],
    ) -> list[AnimalBatchFactor]:
        """Upsert factor values for animals of a batch.

        Args:
            farm_id: Farm scope
            batch_id: Batch the values apply to
            updates: Entries of animal_id, factor_id and factor_value

        Returns:
            The stored rows, one per distinct (animal, factor) pair

        Raises:
            ValidationError: If an entry is incomplete or malformed
            InvalidAnimalId: If an animal id is not a UUID
            NotFoundError: If the batch, an animal or a factor is not in the farm
            DependencyError: If the values cannot be saved
        """
        entries = self._validate_entries(updates)
        await self._get_batch(farm_id, batch_id)

        animal_ids = {animal_id for animal_id, _, _ in entries}
        unknown_animals = animal_ids - await self.animals.existing_ids(farm_id, animal_ids)
        if unknown_animals:
            raise NotFoundError("Animal not found", animal_ids=sorted(str(a) for a in unknown_animals))

        factor_ids = {factor_id for _, factor_id, _ in entries}
        unknown_factors = factor_ids - await self.factors.existing_definition_ids(farm_id, factor_ids)
        if unknown_factors:
            raise NotFoundError("Batch factor not found", factor_ids=sorted(str(f) for f in unknown_factors))

        saved = await self.factors.upsert_values(farm_id, batch_id, entries)
        self.cache.invalidate_batch(farm_id, batch_id)

        logger.info(
            "Animal batch factors updated",
            farm_id=str(farm_id),
            batch_id=str(batch_id),
            entries=len(entries),
            animals=len(animal_ids),
        )
        return saved

    async def multipliers(self, batch_id: UUID) -> dict[UUID, float]:
        """Effective multiplier per animal from the batch's active factor values.

        Animals without values are absent (neutral multiplier).
        """
        values_by_animal: dict[UUID, list[str]] = defaultdict(list)
        for row in await self.factors.list_active_values(batch_id):
            values_by_animal[row.animal_id].append(row.factor_value)
        return {animal_id: effective_multiplier(values) for animal_id, values in values_by_animal.items()}

    @staticmethod
    def _validate_entries(updates: list[FactorUpdate]) -> list[FactorValueEntry]:
        # Later entries for the same (animal, factor) pair win
        entries: dict[tuple[UUID, UUID], str] = {}

        for index, update in enumerate(updates):
            missing = [name for name in REQUIRED_ENTRY_FIELDS if getattr(update, name) in (None, "")]
            if missing:
                raise ValidationError(
                    "Each factor update requires animal_id, factor_id and factor_value",
                    index=index,
                    missing=missing,
                )

            animal_id = parse_animal_id(update.animal_id)
            factor_id = parse_uuid(update.factor_id, "factor_id")
            value = parse_factor_value(update.factor_value)
            entries[(animal_id, factor_id)] = str(value)

        return [(animal_id, factor_id, value) for (animal_id, factor_id), value in entries.items()]

    async def _get_batch(self, farm_id: UUID, batch_id: UUID) -> None:
        if await self.batches.get(farm_id, batch_id) is None:
            raise NotFoundError("Consumption batch not found", batch_id=str(batch_id))
