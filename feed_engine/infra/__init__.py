"""Infrastructure - Database, logging."""

from feed_engine.infra.database import get_db_session, DatabaseSession, close_db_engine
from feed_engine.infra.logging import setup_logging, get_logger, bind_farm_context

__all__ = [
    "get_db_session",
    "DatabaseSession",
    "close_db_engine",
    "setup_logging",
    "get_logger",
    "bind_farm_context",
]
