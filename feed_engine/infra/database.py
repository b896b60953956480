"""Async database configuration with Row Level Security (RLS) support.

Provides:
- Async SQLAlchemy engine and session factory
- RLS farm context setter for multi-tenant isolation
- Commit hooks for work that must wait for the transaction
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Callable

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from feed_engine.config import settings
from feed_engine.infra.logging import get_logger

logger = get_logger(__name__)

# Type alias for dependency injection
DatabaseSession = AsyncSession

# Global engine (initialized on first use)
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Get or create the async database engine."""
    global _engine

    if _engine is None:
        logger.info(
            "Creating database engine",
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_pool_max_overflow,
        )

        _engine = create_async_engine(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_pool_max_overflow,
            pool_pre_ping=True,
            pool_recycle=1800,
            echo=settings.debug,
        )

    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the session factory."""
    global _session_factory

    if _session_factory is None:
        _session_factory = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    return _session_factory


@asynccontextmanager
async def get_db_session(farm_id: str | None = None) -> AsyncGenerator[AsyncSession, None]:
    """Get an async database session with optional RLS farm context.

    The whole block runs in one transaction: it commits when the block
    exits normally and rolls back when it raises, so multi-row writes
    such as factor updates are applied all-or-nothing.

    Args:
        farm_id: Farm ID for RLS isolation. If provided, sets the
                 `app.current_farm` session variable for RLS policies.

    Yields:
        AsyncSession with farm context set

    Example:
        async with get_db_session(farm_id=str(farm_id)) as session:
            result = await session.execute(select(AnimalCategory))
            # RLS filters to the given farm
    """
    factory = get_session_factory()
    session = factory()

    try:
        if farm_id:
            await session.execute(
                text("SELECT set_config('app.current_farm', :farm_id, true)"),
                {"farm_id": farm_id},
            )
            logger.debug("RLS farm context set", farm_id=farm_id)

        yield session
        await session.commit()

    except Exception as e:
        await session.rollback()
        logger.error("Database session error", error=str(e), farm_id=farm_id)
        raise

    finally:
        await session.close()


async def close_db_engine() -> None:
    """Close the database engine and all connections.

    Call this during application shutdown.
    """
    global _engine, _session_factory

    if _engine is not None:
        logger.info("Closing database engine")
        await _engine.dispose()
        _engine = None
        _session_factory = None


async def verify_db_connection() -> bool:
    """Verify database connectivity.

    Returns:
        True if connection successful, False otherwise
    """
    try:
        async with get_db_session() as session:
            await session.execute(text("SELECT 1"))
            logger.info("Database connection verified")
            return True
    except Exception as e:
        logger.error("Database connection failed", error=str(e))
        return False


def run_after_commit(
    session: AsyncSession,
    on_commit: Callable[[], None],
    on_rollback: Callable[[], None] | None = None,
) -> None:
    """Register callbacks for the end of the session's outer transaction.

    `on_commit` runs only once the commit succeeded; savepoint releases
    do not trigger it.
    """

    def _after_commit(_session) -> None:
        on_commit()

    event.listen(session.sync_session, "after_commit", _after_commit)

    if on_rollback is not None:

        def _after_rollback(_session) -> None:
            on_rollback()

        event.listen(session.sync_session, "after_rollback", _after_rollback)
