"""SQLAlchemy models for the feed engine.

`Animal` and `FeedType` are READ-ONLY views of tables owned by the
animal registry and the feed catalog.
"""

from feed_engine.models.base import Base, TimestampMixin
from feed_engine.models.animal import Animal
from feed_engine.models.animal_category import AnimalCategory
from feed_engine.models.batch_factor import AnimalBatchFactor, ConsumptionBatchFactor
from feed_engine.models.consumption_batch import BatchAnimalLink, ConsumptionBatch
from feed_engine.models.feed_type import FeedType
from feed_engine.models.weight_conversion import WeightConversion

__all__ = [
    "Base",
    "TimestampMixin",
    "Animal",
    "AnimalBatchFactor",
    "AnimalCategory",
    "BatchAnimalLink",
    "ConsumptionBatch",
    "ConsumptionBatchFactor",
    "FeedType",
    "WeightConversion",
]
