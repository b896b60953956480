"""Feed cost provider - per-kg cost lookups in the feed catalog."""

from collections.abc import Sequence
from decimal import Decimal
from typing import Protocol
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from feed_engine.core.errors import DependencyError
from feed_engine.infra.logging import get_logger
from feed_engine.models.feed_type import FeedType

logger = get_logger(__name__)


class FeedCostProvider(Protocol):
    """Source of feed cost per kilogram."""

    async def cost_per_kg(
        self, farm_id: UUID, feed_type_category_ids: Sequence[UUID]
    ) -> Decimal | None:
        """Cost per kg for the given feed type categories, None if unknown.

        Raises:
            DependencyError: If the catalog cannot be reached
        """
        ...


class SqlFeedCostProvider:
    """Averages `feed_types.typical_cost_per_kg` over the batch's feed categories."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def cost_per_kg(
        self, farm_id: UUID, feed_type_category_ids: Sequence[UUID]
    ) -> Decimal | None:
        if not feed_type_category_ids:
            return None

        # Savepoint keeps a failed catalog read from aborting the request transaction
        try:
            async with self._session.begin_nested():
                average = await self._session.scalar(
                    select(func.avg(FeedType.typical_cost_per_kg)).where(
                        FeedType.farm_id == farm_id,
                        FeedType.category_id.in_(list(feed_type_category_ids)),
                        FeedType.typical_cost_per_kg.is_not(None),
                    )
                )
        except SQLAlchemyError as e:
            logger.error("Feed catalog read failed", farm_id=str(farm_id), error=str(e))
            raise DependencyError("Feed catalog unavailable", farm_id=str(farm_id)) from e

        return Decimal(average) if average is not None else None
