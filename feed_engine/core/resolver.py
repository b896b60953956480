"""Batch resolver - the set of animals a batch currently targets."""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from feed_engine.core.errors import InvalidTargetMode


class TargetMode(str, Enum):
    """How a batch selects its animals."""

    CATEGORY = "category"
    SPECIFIC = "specific"
    MIXED = "mixed"

    @classmethod
    def parse(cls, value: str) -> "TargetMode":
        try:
            return cls(value)
        except ValueError:
            raise InvalidTargetMode(
                "Target mode must be category, specific, or mixed",
                target_mode=value,
            ) from None

    @property
    def uses_categories(self) -> bool:
        return self in (TargetMode.CATEGORY, TargetMode.MIXED)

    @property
    def uses_links(self) -> bool:
        return self in (TargetMode.SPECIFIC, TargetMode.MIXED)


class MembershipSource(str, Enum):
    """Why an animal is part of a batch."""

    CATEGORY = "category"
    SPECIFIC = "specific"


@dataclass(frozen=True)
class TargetedAnimal:
    """An animal targeted by a batch, with its provenance."""

    animal_id: UUID
    source: MembershipSource


def resolve_targets(
    target_mode: str,
    category_animal_ids: Iterable[UUID],
    linked_animal_ids: Iterable[UUID],
) -> list[TargetedAnimal]:
    """Combine category matches and explicit links according to the mode.

    In mixed mode an animal present in both sets is reported once, as
    category-sourced. Category animals come first, then specific-only
    animals, each in input order.

    Args:
        target_mode: Batch target mode
        category_animal_ids: Ids matched by the batch's categories
        linked_animal_ids: Ids from the batch's explicit links

    Returns:
        Deduplicated list of targeted animals
    """
    mode = TargetMode.parse(target_mode)
    targets: dict[UUID, TargetedAnimal] = {}

    if mode.uses_categories:
        for animal_id in category_animal_ids:
            targets.setdefault(animal_id, TargetedAnimal(animal_id, MembershipSource.CATEGORY))

    if mode.uses_links:
        for animal_id in linked_animal_ids:
            targets.setdefault(animal_id, TargetedAnimal(animal_id, MembershipSource.SPECIFIC))

    return list(targets.values())
