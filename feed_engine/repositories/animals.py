"""Animal snapshot reader - thin adapter over the animal registry."""

from collections.abc import Iterable
from typing import Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from feed_engine.core.errors import DependencyError
from feed_engine.core.snapshot import AnimalSnapshot, snapshot_from_animal
from feed_engine.infra.logging import get_logger
from feed_engine.models.animal import Animal

logger = get_logger(__name__)


class AnimalSnapshotReader(Protocol):
    """Read access to normalized animal snapshots of one farm."""

    async def list_active(self, farm_id: UUID) -> list[AnimalSnapshot]:
        """All active animals of the farm, in registry order."""
        ...

    async def get_many(self, farm_id: UUID, animal_ids: Iterable[UUID]) -> list[AnimalSnapshot]:
        """Snapshots for the given ids (any status); unknown ids are omitted."""
        ...

    async def existing_ids(self, farm_id: UUID, animal_ids: Iterable[UUID]) -> set[UUID]:
        """Subset of animal_ids registered on the farm."""
        ...


class SqlAnimalSnapshotReader:
    """AnimalSnapshotReader backed by the `animals` table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_active(self, farm_id: UUID) -> list[AnimalSnapshot]:
        query = (
            select(Animal)
            .where(Animal.farm_id == farm_id, Animal.status == "active")
            .order_by(Animal.tag_number)
        )
        return [snapshot_from_animal(a) for a in await self._fetch(query, farm_id)]

    async def get_many(self, farm_id: UUID, animal_ids: Iterable[UUID]) -> list[AnimalSnapshot]:
        ids = list(animal_ids)
        if not ids:
            return []
        query = (
            select(Animal)
            .where(Animal.farm_id == farm_id, Animal.id.in_(ids))
            .order_by(Animal.tag_number)
        )
        return [snapshot_from_animal(a) for a in await self._fetch(query, farm_id)]

    async def existing_ids(self, farm_id: UUID, animal_ids: Iterable[UUID]) -> set[UUID]:
        ids = list(animal_ids)
        if not ids:
            return set()
        try:
            result = await self._session.execute(
                select(Animal.id).where(Animal.farm_id == farm_id, Animal.id.in_(ids))
            )
        except SQLAlchemyError as e:
            raise self._unavailable(farm_id, e) from e
        return set(result.scalars().all())

    async def _fetch(self, query, farm_id: UUID) -> list[Animal]:
        try:
            result = await self._session.execute(query)
        except SQLAlchemyError as e:
            raise self._unavailable(farm_id, e) from e
        return list(result.scalars().all())

    @staticmethod
    def _unavailable(farm_id: UUID, error: Exception) -> DependencyError:
        logger.error("Animal registry read failed", farm_id=str(farm_id), error=str(error))
        return DependencyError("Animal registry unavailable", farm_id=str(farm_id))
