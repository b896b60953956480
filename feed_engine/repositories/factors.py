"""Batch factor definitions and per-animal factor values."""

from collections.abc import Iterable, Sequence
from typing import Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from feed_engine.core.errors import DependencyError
from feed_engine.infra.logging import get_logger
from feed_engine.models.batch_factor import AnimalBatchFactor, ConsumptionBatchFactor

logger = get_logger(__name__)

# (animal_id, factor_id, factor_value)
FactorValueEntry = tuple[UUID, UUID, str]


class FactorRepository(Protocol):
    """Farm-scoped storage of factor definitions and factor values."""

    async def list_definitions(
        self, farm_id: UUID, include_inactive: bool = False
    ) -> list[ConsumptionBatchFactor]:
        """Factor definitions ordered by type then name."""
        ...

    async def get_definition(self, farm_id: UUID, factor_id: UUID) -> ConsumptionBatchFactor | None:
        ...

    async def existing_definition_ids(self, farm_id: UUID, factor_ids: Iterable[UUID]) -> set[UUID]:
        ...

    async def add_definition(self, factor: ConsumptionBatchFactor) -> ConsumptionBatchFactor:
        ...

    async def save_definition(self, factor: ConsumptionBatchFactor) -> ConsumptionBatchFactor:
        ...

    async def list_values(self, batch_id: UUID, animal_id: UUID | None = None) -> list[AnimalBatchFactor]:
        ...

    async def list_active_values(self, batch_id: UUID) -> list[AnimalBatchFactor]:
        """Values of the batch whose factor definition is active."""
        ...

    async def upsert_values(
        self, farm_id: UUID, batch_id: UUID, entries: Sequence[FactorValueEntry]
    ) -> list[AnimalBatchFactor]:
        """Insert or update every entry, all-or-nothing."""
        ...


class SqlFactorRepository:
    """FactorRepository backed by `consumption_batch_factors` and `animal_batch_factors`."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_definitions(
        self, farm_id: UUID, include_inactive: bool = False
    ) -> list[ConsumptionBatchFactor]:
        query = select(ConsumptionBatchFactor).where(ConsumptionBatchFactor.farm_id == farm_id)
        if not include_inactive:
            query = query.where(ConsumptionBatchFactor.is_active.is_(True))
        query = query.order_by(ConsumptionBatchFactor.factor_type, ConsumptionBatchFactor.factor_name)
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def get_definition(self, farm_id: UUID, factor_id: UUID) -> ConsumptionBatchFactor | None:
        result = await self._session.execute(
            select(ConsumptionBatchFactor).where(
                ConsumptionBatchFactor.id == factor_id,
                ConsumptionBatchFactor.farm_id == farm_id,
            )
        )
        return result.scalar_one_or_none()

    async def existing_definition_ids(self, farm_id: UUID, factor_ids: Iterable[UUID]) -> set[UUID]:
        ids = list(factor_ids)
        if not ids:
            return set()
        result = await self._session.execute(
            select(ConsumptionBatchFactor.id).where(
                ConsumptionBatchFactor.farm_id == farm_id,
                ConsumptionBatchFactor.id.in_(ids),
            )
        )
        return set(result.scalars().all())

    async def add_definition(self, factor: ConsumptionBatchFactor) -> ConsumptionBatchFactor:
        self._session.add(factor)
        await self._session.flush()
        await self._session.refresh(factor)
        return factor

    async def save_definition(self, factor: ConsumptionBatchFactor) -> ConsumptionBatchFactor:
        await self._session.flush()
        await self._session.refresh(factor)
        return factor

    async def list_values(self, batch_id: UUID, animal_id: UUID | None = None) -> list[AnimalBatchFactor]:
        query = select(AnimalBatchFactor).where(AnimalBatchFactor.batch_id == batch_id)
        if animal_id is not None:
            query = query.where(AnimalBatchFactor.animal_id == animal_id)
        result = await self._session.execute(query.order_by(AnimalBatchFactor.animal_id))
        return list(result.scalars().all())

    async def list_active_values(self, batch_id: UUID) -> list[AnimalBatchFactor]:
        result = await self._session.execute(
            select(AnimalBatchFactor)
            .join(ConsumptionBatchFactor, ConsumptionBatchFactor.id == AnimalBatchFactor.factor_id)
            .where(
                AnimalBatchFactor.batch_id == batch_id,
                ConsumptionBatchFactor.is_active.is_(True),
            )
        )
        return list(result.scalars().all())

    async def upsert_values(
        self, farm_id: UUID, batch_id: UUID, entries: Sequence[FactorValueEntry]
    ) -> list[AnimalBatchFactor]:
        """Insert or update factor values in one savepoint.

        Raises:
            DependencyError: If any row fails; none of the rows are kept
        """
        saved: list[AnimalBatchFactor] = []

        # Savepoint: a failure on any row rolls back every row of this call
        try:
            async with self._session.begin_nested():
                for animal_id, factor_id, factor_value in entries:
                    result = await self._session.execute(
                        select(AnimalBatchFactor).where(
                            AnimalBatchFactor.batch_id == batch_id,
                            AnimalBatchFactor.animal_id == animal_id,
                            AnimalBatchFactor.factor_id == factor_id,
                        )
                    )
                    row = result.scalar_one_or_none()
                    if row is None:
                        row = AnimalBatchFactor(
                            farm_id=farm_id,
                            batch_id=batch_id,
                            animal_id=animal_id,
                            factor_id=factor_id,
                            factor_value=factor_value,
                        )
                        self._session.add(row)
                    else:
                        row.factor_value = factor_value
                    saved.append(row)

                await self._session.flush()
        except SQLAlchemyError as e:
            logger.error(
                "Factor value upsert failed",
                farm_id=str(farm_id),
                batch_id=str(batch_id),
                rows=len(entries),
                error=str(e),
            )
            raise DependencyError("Factor values could not be saved", farm_id=str(farm_id)) from e

        return saved
