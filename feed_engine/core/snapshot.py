"""Normalized animal snapshot consumed by the category matcher."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from feed_engine.models.animal import Animal

PRODUCTION_STATUSES = ("calf", "heifer", "served", "lactating", "dry")
GENDERS = ("male", "female")
GROWTH_STATUSES = frozenset({"calf", "heifer"})


@dataclass(frozen=True)
class AnimalSnapshot:
    """Immutable view of one animal at read time.

    Derived flags are computed once here so that matching stays a pure
    function of the category and the snapshot.
    """

    animal_id: UUID
    tag_number: str
    gender: str
    birth_date: date | None
    production_status: str | None
    status: str = "active"
    name: str | None = None
    weight_kg: float | None = None
    lactating: bool = False
    pregnant: bool = False
    breeding_male: bool = False
    growth_phase: bool = False

    def age_days(self, today: date) -> int | None:
        """Age in whole days, or None without a birth date."""
        if self.birth_date is None:
            return None
        return (today - self.birth_date).days

    @property
    def is_active(self) -> bool:
        return self.status == "active"


def snapshot_from_animal(animal: Animal) -> AnimalSnapshot:
    """Build a snapshot from a registry row, deriving the characteristic flags."""
    status = animal.production_status
    return AnimalSnapshot(
        animal_id=animal.id,
        tag_number=animal.tag_number,
        name=animal.name,
        gender=animal.gender,
        birth_date=animal.birth_date,
        production_status=status,
        status=animal.status,
        weight_kg=float(animal.weight) if animal.weight is not None else None,
        lactating=status == "lactating",
        pregnant=status == "served" or animal.expected_calving_date is not None,
        breeding_male=animal.gender == "male" and status != "calf",
        growth_phase=status in GROWTH_STATUSES,
    )
