"""Category matcher - evaluates category criteria against animal snapshots.

Criteria are checked in a fixed order and evaluation stops at the first
failing criterion:

1. gender
2. age window (inclusive, in days)
3. production status
4. characteristic flags

A characteristic can only be required, never excluded: a category that
leaves a flag unset or false does not constrain it.
"""

from collections.abc import Iterable, Sequence
from datetime import date

from feed_engine.core.snapshot import AnimalSnapshot
from feed_engine.models.animal_category import AnimalCategory

CHARACTERISTICS = ("lactating", "pregnant", "breeding_male", "growth_phase")


def required_characteristics(category: AnimalCategory) -> tuple[str, ...]:
    """Names of the characteristic flags the category sets to true."""
    flags = category.characteristics or {}
    return tuple(name for name in CHARACTERISTICS if flags.get(name) is True)


def matches(category: AnimalCategory, animal: AnimalSnapshot, today: date) -> bool:
    """Check whether an animal satisfies every criterion of a category.

    Args:
        category: Category whose criteria are evaluated
        animal: Snapshot of the animal
        today: Reference date for the age computation

    Returns:
        True if the animal belongs to the category
    """
    if category.gender and animal.gender != category.gender:
        return False

    if category.min_age_days is not None or category.max_age_days is not None:
        age_days = animal.age_days(today)
        if age_days is None:
            return False
        if category.min_age_days is not None and age_days < category.min_age_days:
            return False
        if category.max_age_days is not None and age_days > category.max_age_days:
            return False

    if category.production_status and animal.production_status != category.production_status:
        return False

    for flag in required_characteristics(category):
        if not getattr(animal, flag):
            return False

    return True


def matching_animals(
    category: AnimalCategory,
    animals: Iterable[AnimalSnapshot],
    today: date,
    limit: int | None = None,
) -> tuple[list[AnimalSnapshot], int]:
    """Filter active animals by a category.

    The total is counted over every match so it does not depend on the
    page size.

    Args:
        category: Category to match
        animals: Candidate snapshots (inactive ones are skipped)
        today: Reference date for ages
        limit: Maximum number of snapshots returned (None for all)

    Returns:
        Tuple of (page of matching snapshots, total match count)
    """
    matched = [a for a in animals if a.is_active and matches(category, a, today)]
    page = matched if limit is None else matched[:limit]
    return page, len(matched)


def union_of_categories(
    categories: Sequence[AnimalCategory],
    animals: Sequence[AnimalSnapshot],
    today: date,
) -> list[AnimalSnapshot]:
    """Active animals matching at least one category, deduplicated, in registry order."""
    if not categories:
        return []
    return [
        a for a in animals
        if a.is_active and any(matches(c, a, today) for c in categories)
    ]
