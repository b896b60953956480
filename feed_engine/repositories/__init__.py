"""Repositories - farm-scoped storage interfaces and their SQLAlchemy implementations."""

from feed_engine.repositories.animals import AnimalSnapshotReader, SqlAnimalSnapshotReader
from feed_engine.repositories.batches import BatchRepository, SqlBatchRepository
from feed_engine.repositories.categories import CategoryRepository, SqlCategoryRepository
from feed_engine.repositories.conversions import ConversionRepository, SqlConversionRepository
from feed_engine.repositories.factors import FactorRepository, SqlFactorRepository
from feed_engine.repositories.feed_costs import FeedCostProvider, SqlFeedCostProvider

__all__ = [
    "AnimalSnapshotReader",
    "BatchRepository",
    "CategoryRepository",
    "ConversionRepository",
    "FactorRepository",
    "FeedCostProvider",
    "SqlAnimalSnapshotReader",
    "SqlBatchRepository",
    "SqlCategoryRepository",
    "SqlConversionRepository",
    "SqlFactorRepository",
    "SqlFeedCostProvider",
]
