"""Farm defaults - categories, units, factors and preset batches seeded for new farms.

Defaults are loaded from a YAML file (settings.feed_defaults_path) and
parsed into immutable dataclasses.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from feed_engine.config import settings
from feed_engine.infra.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DefaultCategory:
    """Default animal category definition."""

    name: str
    description: str | None = None
    min_age_days: int | None = None
    max_age_days: int | None = None
    gender: str | None = None
    production_status: str | None = None
    characteristics: dict[str, bool] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DefaultCategory":
        """Create from dictionary."""
        return cls(
            name=data["name"],
            description=data.get("description"),
            min_age_days=data.get("min_age_days"),
            max_age_days=data.get("max_age_days"),
            gender=data.get("gender"),
            production_status=data.get("production_status"),
            characteristics=dict(data.get("characteristics") or {}),
        )


@dataclass(frozen=True)
class DefaultConversion:
    """Default weight unit definition."""

    unit_name: str
    unit_symbol: str
    conversion_to_kg: Decimal
    description: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DefaultConversion":
        """Create from dictionary."""
        return cls(
            unit_name=data["unit_name"],
            unit_symbol=data["unit_symbol"],
            conversion_to_kg=Decimal(str(data["conversion_to_kg"])),
            description=data.get("description"),
        )


@dataclass(frozen=True)
class DefaultFactor:
    """Default batch factor definition."""

    factor_name: str
    factor_type: str = "custom"
    description: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DefaultFactor":
        """Create from dictionary."""
        return cls(
            factor_name=data["factor_name"],
            factor_type=data.get("factor_type", "custom"),
            description=data.get("description"),
        )


@dataclass(frozen=True)
class DefaultBatch:
    """Default (preset) consumption batch.

    Categories are referenced by name and resolved against the farm's
    categories when the batch is seeded.
    """

    batch_name: str
    animal_categories: tuple[str, ...]
    target_mode: str = "category"
    description: str | None = None
    default_quantity_kg: Decimal = Decimal("0")
    feeding_frequency_per_day: int = 2
    feeding_times: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DefaultBatch":
        """Create from dictionary."""
        return cls(
            batch_name=data["batch_name"],
            animal_categories=tuple(data.get("animal_categories") or ()),
            target_mode=data.get("target_mode", "category"),
            description=data.get("description"),
            default_quantity_kg=Decimal(str(data.get("default_quantity_kg", 0))),
            feeding_frequency_per_day=int(data.get("feeding_frequency_per_day", 2)),
            feeding_times=tuple(data.get("feeding_times") or ()),
        )


@dataclass(frozen=True)
class FarmDefaults:
    """Complete default data set for a farm."""

    version: str
    categories: tuple[DefaultCategory, ...]
    conversions: tuple[DefaultConversion, ...]
    factors: tuple[DefaultFactor, ...]
    batches: tuple[DefaultBatch, ...] = ()

    @classmethod
    def from_yaml(cls, yaml_content: str) -> "FarmDefaults":
        """Parse YAML content into FarmDefaults.

        Args:
            yaml_content: Raw YAML string

        Returns:
            Parsed FarmDefaults

        Raises:
            ValueError: If the document is not a mapping, an entry is incomplete
                or a batch references a category the file does not define
        """
        data = yaml.safe_load(yaml_content)
        if not isinstance(data, dict):
            raise ValueError("Feed defaults must be a YAML mapping")

        try:
            defaults = cls(
                version=str(data.get("version", "0.0.0")),
                categories=tuple(
                    DefaultCategory.from_dict(item) for item in data.get("animal_categories", [])
                ),
                conversions=tuple(
                    DefaultConversion.from_dict(item) for item in data.get("weight_conversions", [])
                ),
                factors=tuple(
                    DefaultFactor.from_dict(item) for item in data.get("batch_factors", [])
                ),
                batches=tuple(
                    DefaultBatch.from_dict(item) for item in data.get("consumption_batches", [])
                ),
            )
        except KeyError as e:
            raise ValueError(f"Feed defaults entry missing field: {e.args[0]}") from e

        category_names = {c.name.casefold() for c in defaults.categories}
        for batch in defaults.batches:
            unknown = [n for n in batch.animal_categories if n.casefold() not in category_names]
            if unknown:
                raise ValueError(
                    f"Feed defaults batch '{batch.batch_name}' references unknown categories: {unknown}"
                )

        return defaults


@lru_cache
def load_farm_defaults(path: str | None = None) -> FarmDefaults:
    """Load and cache the farm defaults file.

    Args:
        path: YAML file path (defaults to settings.feed_defaults_path)

    Raises:
        FileNotFoundError: If the file does not exist
    """
    config_path = Path(path or settings.feed_defaults_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Feed defaults not found: {config_path}")

    defaults = FarmDefaults.from_yaml(config_path.read_text(encoding="utf-8"))
    logger.info(
        "Farm defaults loaded",
        path=str(config_path),
        version=defaults.version,
        categories=len(defaults.categories),
        conversions=len(defaults.conversions),
        factors=len(defaults.factors),
        batches=len(defaults.batches),
    )
    return defaults
