"""Consumption batch and batch-animal link repository."""

from typing import Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from feed_engine.models.consumption_batch import BatchAnimalLink, ConsumptionBatch


class BatchRepository(Protocol):
    """Farm-scoped storage of consumption batches and their specific links."""

    async def list_active(self, farm_id: UUID) -> list[ConsumptionBatch]:
        """Active batches, presets first, then by name."""
        ...

    async def list_all(self, farm_id: UUID) -> list[ConsumptionBatch]:
        """Every batch of the farm, inactive ones included."""
        ...

    async def get(self, farm_id: UUID, batch_id: UUID) -> ConsumptionBatch | None:
        ...

    async def add(self, batch: ConsumptionBatch) -> ConsumptionBatch:
        ...

    async def save(self, batch: ConsumptionBatch) -> ConsumptionBatch:
        ...

    async def delete(self, batch: ConsumptionBatch) -> None:
        ...

    async def list_linked_animal_ids(self, batch_id: UUID) -> list[UUID]:
        """Animal ids of the batch's specific links, oldest link first."""
        ...

    async def get_link(self, batch_id: UUID, animal_id: UUID) -> BatchAnimalLink | None:
        ...

    async def add_link(self, link: BatchAnimalLink) -> BatchAnimalLink:
        ...

    async def delete_link(self, link: BatchAnimalLink) -> None:
        ...


class SqlBatchRepository:
    """BatchRepository backed by `consumption_batches` and `consumption_batch_animals`."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_active(self, farm_id: UUID) -> list[ConsumptionBatch]:
        result = await self._session.execute(
            select(ConsumptionBatch)
            .where(ConsumptionBatch.farm_id == farm_id, ConsumptionBatch.is_active.is_(True))
            .order_by(ConsumptionBatch.is_preset.desc(), ConsumptionBatch.batch_name)
        )
        return list(result.scalars().all())

    async def list_all(self, farm_id: UUID) -> list[ConsumptionBatch]:
        result = await self._session.execute(
            select(ConsumptionBatch)
            .where(ConsumptionBatch.farm_id == farm_id)
            .order_by(ConsumptionBatch.batch_name)
        )
        return list(result.scalars().all())

    async def get(self, farm_id: UUID, batch_id: UUID) -> ConsumptionBatch | None:
        result = await self._session.execute(
            select(ConsumptionBatch).where(
                ConsumptionBatch.id == batch_id,
                ConsumptionBatch.farm_id == farm_id,
            )
        )
        return result.scalar_one_or_none()

    async def add(self, batch: ConsumptionBatch) -> ConsumptionBatch:
        self._session.add(batch)
        await self._session.flush()
        await self._session.refresh(batch)
        return batch

    async def save(self, batch: ConsumptionBatch) -> ConsumptionBatch:
        await self._session.flush()
        await self._session.refresh(batch)
        return batch

    async def delete(self, batch: ConsumptionBatch) -> None:
        await self._session.delete(batch)
        await self._session.flush()

    async def list_linked_animal_ids(self, batch_id: UUID) -> list[UUID]:
        result = await self._session.execute(
            select(BatchAnimalLink.animal_id)
            .where(BatchAnimalLink.batch_id == batch_id)
            .order_by(BatchAnimalLink.created_at)
        )
        return list(result.scalars().all())

    async def get_link(self, batch_id: UUID, animal_id: UUID) -> BatchAnimalLink | None:
        result = await self._session.execute(
            select(BatchAnimalLink).where(
                BatchAnimalLink.batch_id == batch_id,
                BatchAnimalLink.animal_id == animal_id,
            )
        )
        return result.scalar_one_or_none()

    async def add_link(self, link: BatchAnimalLink) -> BatchAnimalLink:
        self._session.add(link)
        await self._session.flush()
        return link

    async def delete_link(self, link: BatchAnimalLink) -> None:
        await self._session.delete(link)
        await self._session.flush()
