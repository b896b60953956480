"""Pydantic schemas for request/response validation."""

from feed_engine.schemas.animal import AnimalSnapshotRead, MatchingAnimalsRead
from feed_engine.schemas.batch import (
    AddAnimalRequest,
    BatchAnimalLinkRead,
    BatchCreate,
    BatchRead,
    BatchTargetsRead,
    BatchUpdate,
    TargetedAnimalRead,
)
from feed_engine.schemas.category import (
    CategoryCharacteristics,
    CategoryCreate,
    CategoryRead,
    CategoryUpdate,
)
from feed_engine.schemas.common import ApiResponse, ErrorResponse, HealthResponse
from feed_engine.schemas.conversion import (
    ConversionCreate,
    ConversionRead,
    ConversionUpdate,
    ConvertRequest,
    ConvertResponse,
)
from feed_engine.schemas.factor import (
    AnimalBatchFactorRead,
    BatchFactorCreate,
    BatchFactorRead,
    BatchFactorUpdate,
    FactorUpdate,
    FactorUpdateRequest,
)
from feed_engine.schemas.farm import FarmDefaultsResult
from feed_engine.schemas.insights import BatchInsightsRead

__all__ = [
    "AddAnimalRequest",
    "AnimalBatchFactorRead",
    "AnimalSnapshotRead",
    "ApiResponse",
    "BatchAnimalLinkRead",
    "BatchCreate",
    "BatchFactorCreate",
    "BatchFactorRead",
    "BatchFactorUpdate",
    "BatchInsightsRead",
    "BatchRead",
    "BatchTargetsRead",
    "BatchUpdate",
    "CategoryCharacteristics",
    "CategoryCreate",
    "CategoryRead",
    "CategoryUpdate",
    "ConversionCreate",
    "ConversionRead",
    "ConversionUpdate",
    "ConvertRequest",
    "ConvertResponse",
    "ErrorResponse",
    "FactorUpdate",
    "FactorUpdateRequest",
    "FarmDefaultsResult",
    "HealthResponse",
    "MatchingAnimalsRead",
    "TargetedAnimalRead",
]
