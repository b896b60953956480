#!/usr/bin/env python
"""Seed a farm with the default feed management settings.

This script:
1. Optionally creates the feed management tables (local databases)
2. Inserts the default animal categories, weight units and batch factors
   for a farm, skipping rows that already exist

Usage:
    # Seed one farm
    python scripts/seed_farm_defaults.py --farm 6f1c1f9e-0d7a-4c59-9b0e-1b7a3c1f2d44

    # Create tables first on a fresh local database
    python scripts/seed_farm_defaults.py --farm <uuid> --create-tables

    # Show the defaults that would be applied
    python scripts/seed_farm_defaults.py --show-defaults
"""

import argparse
import asyncio
import sys
from pathlib import Path
from uuid import UUID

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from feed_engine.core.farm_defaults import load_farm_defaults
from feed_engine.core.target_cache import get_target_cache
from feed_engine.infra.database import close_db_engine, get_db_session, get_engine
from feed_engine.infra.logging import get_logger, setup_logging
from feed_engine.models import Base
from feed_engine.repositories import (
    SqlBatchRepository,
    SqlCategoryRepository,
    SqlConversionRepository,
    SqlFactorRepository,
)
from feed_engine.services import DefaultsService

setup_logging()
logger = get_logger(__name__)


async def create_tables() -> None:
    """Create every feed engine table that does not exist yet."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Feed engine tables ensured", tables=sorted(Base.metadata.tables))


async def seed_farm(farm_id: UUID, defaults_path: str | None) -> int:
    """Insert the defaults for one farm.

    Returns:
        Number of rows created
    """
    async with get_db_session(farm_id=str(farm_id)) as session:
        service = DefaultsService(
            SqlCategoryRepository(session),
            SqlConversionRepository(session),
            SqlFactorRepository(session),
            SqlBatchRepository(session),
            get_target_cache(),
            loader=lambda: load_farm_defaults(defaults_path),
        )
        result = await service.initialize_farm_defaults(farm_id)

    print(f"\nFarm {farm_id} (defaults v{result.version}):")
    print(f"  Categories created:  {result.categories_created}")
    print(f"  Conversions created: {result.conversions_created}")
    print(f"  Factors created:     {result.factors_created}")
    print(f"  Preset batches:      {result.batches_created}")
    return result.total_created


def show_defaults(defaults_path: str | None) -> None:
    defaults = load_farm_defaults(defaults_path)

    print(f"\nFeed defaults v{defaults.version}")
    print("-" * 40)
    print("Animal categories:")
    for category in defaults.categories:
        print(f"  - {category.name}")
    print("Weight conversions:")
    for conversion in defaults.conversions:
        print(f"  - {conversion.unit_symbol}: {conversion.conversion_to_kg} kg")
    print("Batch factors:")
    for factor in defaults.factors:
        print(f"  - {factor.factor_name} ({factor.factor_type})")
    print("Preset batches:")
    for batch in defaults.batches:
        print(f"  - {batch.batch_name}: {', '.join(batch.animal_categories)}")


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Seed default feed management settings for a farm",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--farm",
        type=UUID,
        help="Farm ID to seed",
    )
    parser.add_argument(
        "--defaults",
        type=str,
        default=None,
        help="Path to the defaults YAML (default: FEED_DEFAULTS_PATH setting)",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before seeding",
    )
    parser.add_argument(
        "--show-defaults",
        action="store_true",
        help="Print the defaults file and exit",
    )

    return parser.parse_args()


async def main() -> int:
    """Main entry point."""
    args = parse_args()

    try:
        if args.show_defaults:
            show_defaults(args.defaults)
            return 0

        if not args.farm:
            print("Error: --farm is required (or use --show-defaults)")
            return 1

        if args.create_tables:
            await create_tables()

        created = await seed_farm(args.farm, args.defaults)
        print("\nFarm defaults applied" if created else "\nFarm already had every default")
        return 0

    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    finally:
        await close_db_engine()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
