"""FastAPI dependencies for dependency injection.

Provides:
- Farm-scoped database session with RLS context
- Request view of the target cache, flushed after commit
- Services wired to their SQL repositories
"""

from typing import Annotated, AsyncGenerator
from uuid import UUID

from fastapi import Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from feed_engine.core.target_cache import TargetCache, TransactionCache, get_target_cache
from feed_engine.infra.database import get_db_session, run_after_commit
from feed_engine.infra.logging import bind_farm_context
from feed_engine.repositories import (
    SqlAnimalSnapshotReader,
    SqlBatchRepository,
    SqlCategoryRepository,
    SqlConversionRepository,
    SqlFactorRepository,
    SqlFeedCostProvider,
)
from feed_engine.services import (
    BatchService,
    CategoryService,
    ConversionService,
    DefaultsService,
    FactorService,
    InsightsService,
)


async def get_farm_id(
    farm_id: Annotated[UUID, Path(description="Farm the request is scoped to")],
) -> UUID:
    """Farm ID from the route path.

    Authorization has already been checked upstream; this only scopes
    the request and its log events.
    """
    bind_farm_context(farm_id)
    return farm_id


FarmId = Annotated[UUID, Depends(get_farm_id)]


async def get_db(farm_id: FarmId) -> AsyncGenerator[AsyncSession, None]:
    """Get database session with RLS farm context.

    Args:
        farm_id: Farm ID for RLS isolation

    Yields:
        AsyncSession with farm context, committed when the request succeeds
    """
    async with get_db_session(farm_id=str(farm_id)) as session:
        yield session


async def get_cache() -> TargetCache:
    """Get target cache dependency."""
    return get_target_cache()


# Type aliases for cleaner annotations
DbSession = Annotated[AsyncSession, Depends(get_db)]
Cache = Annotated[TargetCache, Depends(get_cache)]


def get_request_cache(db: DbSession, cache: Cache) -> TransactionCache:
    """Target cache whose invalidations are repeated once the request commits.

    Readers that loaded rows before the commit cannot leave their result
    behind in the shared cache.
    """
    request_cache = TransactionCache(cache)
    run_after_commit(db, request_cache.flush, on_rollback=request_cache.discard)
    return request_cache


RequestCache = Annotated[TransactionCache, Depends(get_request_cache)]


def get_category_service(db: DbSession, cache: RequestCache) -> CategoryService:
    return CategoryService(SqlCategoryRepository(db), SqlAnimalSnapshotReader(db), cache)


def get_batch_service(db: DbSession, cache: RequestCache) -> BatchService:
    return BatchService(
        SqlBatchRepository(db),
        SqlCategoryRepository(db),
        SqlAnimalSnapshotReader(db),
        cache,
    )


def get_factor_service(db: DbSession, cache: RequestCache) -> FactorService:
    return FactorService(
        SqlFactorRepository(db),
        SqlBatchRepository(db),
        SqlAnimalSnapshotReader(db),
        cache,
    )


def get_conversion_service(db: DbSession) -> ConversionService:
    return ConversionService(SqlConversionRepository(db))


def get_insights_service(
    db: DbSession,
    cache: RequestCache,
    batch_service: Annotated[BatchService, Depends(get_batch_service)],
    factor_service: Annotated[FactorService, Depends(get_factor_service)],
) -> InsightsService:
    return InsightsService(batch_service, factor_service, SqlFeedCostProvider(db), cache)


def get_defaults_service(db: DbSession, cache: RequestCache) -> DefaultsService:
    return DefaultsService(
        SqlCategoryRepository(db),
        SqlConversionRepository(db),
        SqlFactorRepository(db),
        SqlBatchRepository(db),
        cache,
    )


Categories = Annotated[CategoryService, Depends(get_category_service)]
Batches = Annotated[BatchService, Depends(get_batch_service)]
Factors = Annotated[FactorService, Depends(get_factor_service)]
Conversions = Annotated[ConversionService, Depends(get_conversion_service)]
Insights = Annotated[InsightsService, Depends(get_insights_service)]
Defaults = Annotated[DefaultsService, Depends(get_defaults_service)]
