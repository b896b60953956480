"""Weight conversion repository."""

from typing import Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from feed_engine.models.weight_conversion import WeightConversion


class ConversionRepository(Protocol):
    """Farm-scoped storage of weight conversions."""

    async def list_all(self, farm_id: UUID) -> list[WeightConversion]:
        """Conversions of the farm, defaults first, then by unit name."""
        ...

    async def get(self, farm_id: UUID, conversion_id: UUID) -> WeightConversion | None:
        ...

    async def add(self, conversion: WeightConversion) -> WeightConversion:
        ...

    async def save(self, conversion: WeightConversion) -> WeightConversion:
        ...

    async def delete(self, conversion: WeightConversion) -> None:
        ...


class SqlConversionRepository:
    """ConversionRepository backed by the `weight_conversions` table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_all(self, farm_id: UUID) -> list[WeightConversion]:
        result = await self._session.execute(
            select(WeightConversion)
            .where(WeightConversion.farm_id == farm_id)
            .order_by(WeightConversion.is_default.desc(), WeightConversion.unit_name)
        )
        return list(result.scalars().all())

    async def get(self, farm_id: UUID, conversion_id: UUID) -> WeightConversion | None:
        result = await self._session.execute(
            select(WeightConversion).where(
                WeightConversion.id == conversion_id,
                WeightConversion.farm_id == farm_id,
            )
        )
        return result.scalar_one_or_none()

    async def add(self, conversion: WeightConversion) -> WeightConversion:
        self._session.add(conversion)
        await self._session.flush()
        await self._session.refresh(conversion)
        return conversion

    async def save(self, conversion: WeightConversion) -> WeightConversion:
        await self._session.flush()
        await self._session.refresh(conversion)
        return conversion

    async def delete(self, conversion: WeightConversion) -> None:
        await self._session.delete(conversion)
        await self._session.flush()
