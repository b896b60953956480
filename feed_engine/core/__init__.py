"""Core module - matching, targeting, factors, insights and unit conversion."""

from feed_engine.core.errors import (
    ConflictError,
    DependencyError,
    FeedEngineError,
    NotFoundError,
    ValidationError,
)
from feed_engine.core.insights import BatchInsights, compute_insights
from feed_engine.core.matcher import matches, matching_animals
from feed_engine.core.resolver import MembershipSource, TargetMode, TargetedAnimal, resolve_targets
from feed_engine.core.snapshot import AnimalSnapshot, snapshot_from_animal
from feed_engine.core.target_cache import TargetCache, get_target_cache

__all__ = [
    "AnimalSnapshot",
    "BatchInsights",
    "ConflictError",
    "DependencyError",
    "FeedEngineError",
    "MembershipSource",
    "NotFoundError",
    "TargetCache",
    "TargetMode",
    "TargetedAnimal",
    "ValidationError",
    "compute_insights",
    "get_target_cache",
    "matches",
    "matching_animals",
    "resolve_targets",
    "snapshot_from_animal",
]
