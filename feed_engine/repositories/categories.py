"""Animal category repository."""

from collections.abc import Iterable
from typing import Protocol
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from feed_engine.models.animal_category import AnimalCategory


class CategoryRepository(Protocol):
    """Farm-scoped storage of animal categories."""

    async def list_all(self, farm_id: UUID) -> list[AnimalCategory]:
        """Categories of the farm ordered by sort_order."""
        ...

    async def get(self, farm_id: UUID, category_id: UUID) -> AnimalCategory | None:
        ...

    async def get_many(self, farm_id: UUID, category_ids: Iterable[UUID]) -> list[AnimalCategory]:
        ...

    async def max_sort_order(self, farm_id: UUID) -> int | None:
        ...

    async def add(self, category: AnimalCategory) -> AnimalCategory:
        ...

    async def save(self, category: AnimalCategory) -> AnimalCategory:
        ...

    async def delete(self, category: AnimalCategory) -> None:
        ...


class SqlCategoryRepository:
    """CategoryRepository backed by the `animal_categories` table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_all(self, farm_id: UUID) -> list[AnimalCategory]:
        result = await self._session.execute(
            select(AnimalCategory)
            .where(AnimalCategory.farm_id == farm_id)
            .order_by(AnimalCategory.sort_order.asc().nulls_last(), AnimalCategory.name)
        )
        return list(result.scalars().all())

    async def get(self, farm_id: UUID, category_id: UUID) -> AnimalCategory | None:
        result = await self._session.execute(
            select(AnimalCategory).where(
                AnimalCategory.id == category_id,
                AnimalCategory.farm_id == farm_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_many(self, farm_id: UUID, category_ids: Iterable[UUID]) -> list[AnimalCategory]:
        ids = list(category_ids)
        if not ids:
            return []
        result = await self._session.execute(
            select(AnimalCategory).where(
                AnimalCategory.farm_id == farm_id,
                AnimalCategory.id.in_(ids),
            )
        )
        return list(result.scalars().all())

    async def max_sort_order(self, farm_id: UUID) -> int | None:
        return await self._session.scalar(
            select(func.max(AnimalCategory.sort_order)).where(AnimalCategory.farm_id == farm_id)
        )

    async def add(self, category: AnimalCategory) -> AnimalCategory:
        self._session.add(category)
        await self._session.flush()
        await self._session.refresh(category)
        return category

    async def save(self, category: AnimalCategory) -> AnimalCategory:
        await self._session.flush()
        await self._session.refresh(category)
        return category

    async def delete(self, category: AnimalCategory) -> None:
        await self._session.delete(category)
        await self._session.flush()
