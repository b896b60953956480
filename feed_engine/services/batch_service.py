"""Batch service - consumption batches and the animals they target.

Targets are resolved in two stages: category rules are evaluated
against the live animal snapshot, then merged with the batch's explicit
links according to its target mode. The result is cached per batch
until a write touches the batch, its categories or its animals.
"""

from collections.abc import Callable
from datetime import date
from uuid import UUID

from feed_engine.core.errors import (
    AnimalNotLinked,
    InvalidTargetMode,
    NotFoundError,
    ProtectedDefault,
)
from feed_engine.core.identifiers import parse_animal_id
from feed_engine.core.matcher import union_of_categories
from feed_engine.core.resolver import TargetedAnimal, TargetMode, resolve_targets
from feed_engine.core.target_cache import ResultCache, get_target_cache
from feed_engine.infra.logging import get_logger
from feed_engine.models.consumption_batch import BatchAnimalLink, ConsumptionBatch
from feed_engine.repositories.animals import AnimalSnapshotReader
from feed_engine.repositories.batches import BatchRepository
from feed_engine.repositories.categories import CategoryRepository
from feed_engine.schemas.animal import AnimalSnapshotRead
from feed_engine.schemas.batch import BatchCreate, BatchTargetsRead, BatchUpdate, TargetedAnimalRead

logger = get_logger(__name__)

TARGETS = "targets"

TARGET_DETAIL_FIELDS = (
    "tag_number",
    "name",
    "gender",
    "birth_date",
    "production_status",
    "status",
    "weight_kg",
)


class BatchService:
    """Consumption batch management and target resolution for a farm."""

    def __init__(
        self,
        batches: BatchRepository,
        categories: CategoryRepository,
        animals: AnimalSnapshotReader,
        cache: ResultCache,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.batches = batches
        self.categories = categories
        self.animals = animals
        self.cache = cache
        self._today = today

    # =========================================================================
    # Batch CRUD
    # =========================================================================

    async def get_batches(self, farm_id: UUID) -> list[ConsumptionBatch]:
        return await self.batches.list_active(farm_id)

    async def get_batch(self, farm_id: UUID, batch_id: UUID) -> ConsumptionBatch:
        """Fetch a batch of the farm.

        Raises:
            NotFoundError: If the batch does not exist in this farm
        """
        batch = await self.batches.get(farm_id, batch_id)
        if batch is None:
            raise NotFoundError("Consumption batch not found", batch_id=str(batch_id))
        return batch

    async def create_batch(self, farm_id: UUID, data: BatchCreate) -> ConsumptionBatch:
        """Create a batch.

        Raises:
            InvalidTargetMode: If target_mode is not category, specific or mixed
            NotFoundError: If a referenced category is not in the farm
        """
        mode = TargetMode.parse(data.target_mode)
        await self._ensure_categories_exist(farm_id, data.animal_category_ids)

        batch = await self.batches.add(
            ConsumptionBatch(
                farm_id=farm_id,
                batch_name=data.batch_name,
                description=data.description,
                target_mode=mode.value,
                animal_category_ids=list(data.animal_category_ids),
                feed_type_category_ids=list(data.feed_type_category_ids),
                default_quantity_kg=data.default_quantity_kg,
                feeding_frequency_per_day=data.feeding_frequency_per_day,
                feeding_times=list(data.feeding_times),
                is_active=data.is_active,
                is_preset=False,
            )
        )

        logger.info(
            "Consumption batch created",
            farm_id=str(farm_id),
            batch_id=str(batch.id),
            target_mode=batch.target_mode,
            categories=len(batch.animal_category_ids),
        )
        return batch

    async def update_batch(self, farm_id: UUID, batch_id: UUID, data: BatchUpdate) -> ConsumptionBatch:
        """Apply a partial update to a batch.

        Changing the mode keeps existing links; they only count again when
        the batch is back in specific or mixed mode.
        """
        batch = await self.get_batch(farm_id, batch_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("target_mode") is not None:
            changes["target_mode"] = TargetMode.parse(changes["target_mode"]).value
        if changes.get("animal_category_ids") is not None:
            await self._ensure_categories_exist(farm_id, changes["animal_category_ids"])

        for field, value in changes.items():
            # Only nullable column of the payload is description
            if value is None and field != "description":
                continue
            setattr(batch, field, value)

        batch = await self.batches.save(batch)
        self.cache.invalidate_batch(farm_id, batch_id)

        logger.info(
            "Consumption batch updated",
            farm_id=str(farm_id),
            batch_id=str(batch_id),
            fields=sorted(data.model_fields_set),
        )
        return batch

    async def delete_batch(self, farm_id: UUID, batch_id: UUID) -> None:
        """Delete a batch with its links and factor values.

        Raises:
            ProtectedDefault: If the batch is a preset
        """
        batch = await self.get_batch(farm_id, batch_id)
        if batch.is_preset:
            raise ProtectedDefault("Preset batches cannot be deleted", batch_id=str(batch_id))

        await self.batches.delete(batch)
        self.cache.invalidate_batch(farm_id, batch_id)
        logger.info("Consumption batch deleted", farm_id=str(farm_id), batch_id=str(batch_id))

    # =========================================================================
    # Target resolution
    # =========================================================================

    async def resolve_targets(self, farm_id: UUID, batch: ConsumptionBatch) -> list[TargetedAnimal]:
        """Animals the batch targets right now, served from cache when fresh."""
        cached = self.cache.get(farm_id, batch.id, TARGETS)
        if cached is not None:
            return cached

        version = self.cache.version(farm_id, batch.id)
        mode = TargetMode.parse(batch.target_mode)

        category_ids: list[UUID] = []
        if mode.uses_categories and batch.animal_category_ids:
            categories = await self.categories.get_many(farm_id, batch.animal_category_ids)
            animals = await self.animals.list_active(farm_id)
            category_ids = [a.animal_id for a in union_of_categories(categories, animals, self._today())]

        linked_ids: list[UUID] = []
        if mode.uses_links:
            linked_ids = await self.batches.list_linked_animal_ids(batch.id)

        targets = resolve_targets(mode.value, category_ids, linked_ids)
        self.cache.set(farm_id, batch.id, TARGETS, targets, version=version)

        logger.debug(
            "Batch targets resolved",
            farm_id=str(farm_id),
            batch_id=str(batch.id),
            target_mode=mode.value,
            targeted=len(targets),
        )
        return targets

    async def get_batch_targets(
        self,
        farm_id: UUID,
        batch_id: UUID,
        include_available: bool = False,
    ) -> BatchTargetsRead:
        """Targeted animals with snapshot details, optionally with the untargeted active animals."""
        batch = await self.get_batch(farm_id, batch_id)
        targets = await self.resolve_targets(farm_id, batch)

        snapshots = {
            s.animal_id: s
            for s in await self.animals.get_many(farm_id, [t.animal_id for t in targets])
        }

        targeted: list[TargetedAnimalRead] = []
        for target in targets:
            snapshot = snapshots.get(target.animal_id)
            details = {}
            if snapshot is not None:
                details = {field: getattr(snapshot, field) for field in TARGET_DETAIL_FIELDS}
            targeted.append(
                TargetedAnimalRead(animal_id=target.animal_id, source=target.source.value, **details)
            )

        available = None
        if include_available:
            targeted_ids = {t.animal_id for t in targets}
            available = [
                AnimalSnapshotRead.model_validate(a)
                for a in await self.animals.list_active(farm_id)
                if a.animal_id not in targeted_ids
            ]

        return BatchTargetsRead(
            batch_id=batch.id,
            target_mode=batch.target_mode,
            total_targeted=len(targeted),
            targeted=targeted,
            available=available,
        )

    # =========================================================================
    # Explicit membership
    # =========================================================================

    async def add_animal_to_batch(
        self,
        farm_id: UUID,
        batch_id: UUID,
        animal_id: str | UUID,
    ) -> BatchAnimalLink:
        """Link an animal to a specific or mixed batch.

        Adding an animal that is already linked returns the existing link.

        Raises:
            InvalidAnimalId: If animal_id is not a UUID
            InvalidTargetMode: If the batch is in category mode
            NotFoundError: If the batch or the animal is not in the farm
        """
        parsed_id = parse_animal_id(animal_id)
        batch = await self._get_linkable_batch(farm_id, batch_id)

        if not await self.animals.existing_ids(farm_id, [parsed_id]):
            raise NotFoundError("Animal not found", animal_id=str(parsed_id))

        existing = await self.batches.get_link(batch.id, parsed_id)
        if existing is not None:
            logger.debug(
                "Animal already linked to batch",
                farm_id=str(farm_id),
                batch_id=str(batch_id),
                animal_id=str(parsed_id),
            )
            return existing

        link = await self.batches.add_link(BatchAnimalLink(batch_id=batch.id, animal_id=parsed_id))
        self.cache.invalidate_batch(farm_id, batch_id)

        logger.info(
            "Animal added to batch",
            farm_id=str(farm_id),
            batch_id=str(batch_id),
            animal_id=str(parsed_id),
        )
        return link

    async def remove_animal_from_batch(
        self,
        farm_id: UUID,
        batch_id: UUID,
        animal_id: str | UUID,
    ) -> None:
        """Delete an explicit link.

        In a mixed batch an animal that also matches one of the batch's
        categories stays targeted after its link is removed.

        Raises:
            InvalidAnimalId: If animal_id is not a UUID
            InvalidTargetMode: If the batch is in category mode
            AnimalNotLinked: If the animal has no link to the batch
        """
        parsed_id = parse_animal_id(animal_id)
        batch = await self._get_linkable_batch(farm_id, batch_id)

        link = await self.batches.get_link(batch.id, parsed_id)
        if link is None:
            raise AnimalNotLinked(
                "Animal is not linked to this batch",
                batch_id=str(batch_id),
                animal_id=str(parsed_id),
            )

        await self.batches.delete_link(link)
        self.cache.invalidate_batch(farm_id, batch_id)

        logger.info(
            "Animal removed from batch",
            farm_id=str(farm_id),
            batch_id=str(batch_id),
            animal_id=str(parsed_id),
        )

    async def _get_linkable_batch(self, farm_id: UUID, batch_id: UUID) -> ConsumptionBatch:
        batch = await self.get_batch(farm_id, batch_id)
        if not TargetMode.parse(batch.target_mode).uses_links:
            raise InvalidTargetMode(
                "Animals can only be added to or removed from specific or mixed batches",
                batch_id=str(batch_id),
                target_mode=batch.target_mode,
            )
        return batch

    async def _ensure_categories_exist(self, farm_id: UUID, category_ids: list[UUID]) -> None:
        if not category_ids:
            return
        found = {c.id for c in await self.categories.get_many(farm_id, category_ids)}
        missing = [str(cid) for cid in category_ids if cid not in found]
        if missing:
            raise NotFoundError("Animal category not found", category_ids=missing)


def notify_animal_changed(farm_id: UUID, cache: ResultCache | None = None) -> None:
    """Drop cached targets after the registry changed an animal of the farm.

    Category membership depends on animal attributes, so every batch of
    the farm may resolve differently afterwards.
    """
    (cache or get_target_cache()).invalidate_farm(farm_id)
    logger.info("Animal change notified", farm_id=str(farm_id))
