"""Services - feed management operations over the repositories."""

from feed_engine.services.batch_service import BatchService
from feed_engine.services.category_service import CategoryService
from feed_engine.services.conversion_service import ConversionService
from feed_engine.services.defaults_service import DefaultsService
from feed_engine.services.factor_service import FactorService
from feed_engine.services.insights_service import InsightsService

__all__ = [
    "BatchService",
    "CategoryService",
    "ConversionService",
    "DefaultsService",
    "FactorService",
    "InsightsService",
]
