"""Shared fixtures: in-memory repositories, services and an API client.

The fakes implement the repository protocols over plain lists so that
services and routes run without a database.
"""

from collections.abc import Iterable, Sequence
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import UUID, uuid4

import pytest
from httpx import ASGITransport, AsyncClient

from feed_engine.core.errors import DependencyError
from feed_engine.core.farm_defaults import FarmDefaults
from feed_engine.core.snapshot import AnimalSnapshot, snapshot_from_animal
from feed_engine.core.target_cache import TargetCache
from feed_engine.models import (
    Animal,
    AnimalBatchFactor,
    AnimalCategory,
    BatchAnimalLink,
    ConsumptionBatch,
    ConsumptionBatchFactor,
    WeightConversion,
)
from feed_engine.services import (
    BatchService,
    CategoryService,
    ConversionService,
    DefaultsService,
    FactorService,
    InsightsService,
)

TODAY = date(2026, 6, 1)


def _stamp(row) -> None:
    now = datetime.now(timezone.utc)
    if row.id is None:
        row.id = uuid4()
    if row.created_at is None:
        row.created_at = now
    row.updated_at = now


def make_animal(
    farm_id: UUID,
    tag_number: str,
    gender: str = "female",
    age_days: int | None = 800,
    production_status: str | None = None,
    status: str = "active",
    expected_calving_date: date | None = None,
    weight: Decimal | None = None,
) -> AnimalSnapshot:
    """Snapshot of a registry animal aged age_days at TODAY."""
    birth_date = date.fromordinal(TODAY.toordinal() - age_days) if age_days is not None else None
    animal = Animal(
        id=uuid4(),
        farm_id=farm_id,
        tag_number=tag_number,
        gender=gender,
        birth_date=birth_date,
        status=status,
        production_status=production_status,
        expected_calving_date=expected_calving_date,
        weight=weight,
    )
    return snapshot_from_animal(animal)


# =============================================================================
# In-memory repositories
# =============================================================================


class FakeAnimalReader:
    def __init__(self) -> None:
        self.animals: dict[UUID, list[AnimalSnapshot]] = {}
        self.fail = False
        self.calls = 0

    def add(self, farm_id: UUID, *snapshots: AnimalSnapshot) -> None:
        self.animals.setdefault(farm_id, []).extend(snapshots)

    def replace(self, farm_id: UUID, snapshot: AnimalSnapshot) -> None:
        rows = self.animals[farm_id]
        for index, row in enumerate(rows):
            if row.animal_id == snapshot.animal_id:
                rows[index] = snapshot

    def _rows(self, farm_id: UUID) -> list[AnimalSnapshot]:
        self.calls += 1
        if self.fail:
            raise DependencyError("Animal registry unavailable", farm_id=str(farm_id))
        return list(self.animals.get(farm_id, []))

    async def list_active(self, farm_id: UUID) -> list[AnimalSnapshot]:
        return [a for a in self._rows(farm_id) if a.is_active]

    async def get_many(self, farm_id: UUID, animal_ids: Iterable[UUID]) -> list[AnimalSnapshot]:
        wanted = set(animal_ids)
        return [a for a in self._rows(farm_id) if a.animal_id in wanted]

    async def existing_ids(self, farm_id: UUID, animal_ids: Iterable[UUID]) -> set[UUID]:
        wanted = set(animal_ids)
        return {a.animal_id for a in self._rows(farm_id) if a.animal_id in wanted}


class FakeCategoryRepository:
    def __init__(self) -> None:
        self.rows: list[AnimalCategory] = []

    async def list_all(self, farm_id: UUID) -> list[AnimalCategory]:
        rows = [c for c in self.rows if c.farm_id == farm_id]
        return sorted(rows, key=lambda c: (c.sort_order is None, c.sort_order or 0, c.name))

    async def get(self, farm_id: UUID, category_id: UUID) -> AnimalCategory | None:
        return next((c for c in self.rows if c.farm_id == farm_id and c.id == category_id), None)

    async def get_many(self, farm_id: UUID, category_ids: Iterable[UUID]) -> list[AnimalCategory]:
        wanted = set(category_ids)
        return [c for c in self.rows if c.farm_id == farm_id and c.id in wanted]

    async def max_sort_order(self, farm_id: UUID) -> int | None:
        orders = [c.sort_order for c in self.rows if c.farm_id == farm_id and c.sort_order is not None]
        return max(orders) if orders else None

    async def add(self, category: AnimalCategory) -> AnimalCategory:
        _stamp(category)
        self.rows.append(category)
        return category

    async def save(self, category: AnimalCategory) -> AnimalCategory:
        _stamp(category)
        return category

    async def delete(self, category: AnimalCategory) -> None:
        self.rows.remove(category)


class FakeBatchRepository:
    def __init__(self) -> None:
        self.rows: list[ConsumptionBatch] = []
        self.links: list[BatchAnimalLink] = []

    async def list_active(self, farm_id: UUID) -> list[ConsumptionBatch]:
        rows = [b for b in self.rows if b.farm_id == farm_id and b.is_active]
        return sorted(rows, key=lambda b: (not b.is_preset, b.batch_name))

    async def list_all(self, farm_id: UUID) -> list[ConsumptionBatch]:
        return sorted((b for b in self.rows if b.farm_id == farm_id), key=lambda b: b.batch_name)

    async def get(self, farm_id: UUID, batch_id: UUID) -> ConsumptionBatch | None:
        return next((b for b in self.rows if b.farm_id == farm_id and b.id == batch_id), None)

    async def add(self, batch: ConsumptionBatch) -> ConsumptionBatch:
        _stamp(batch)
        self.rows.append(batch)
        return batch

    async def save(self, batch: ConsumptionBatch) -> ConsumptionBatch:
        _stamp(batch)
        return batch

    async def delete(self, batch: ConsumptionBatch) -> None:
        self.rows.remove(batch)
        self.links = [link for link in self.links if link.batch_id != batch.id]

    async def list_linked_animal_ids(self, batch_id: UUID) -> list[UUID]:
        return [link.animal_id for link in self.links if link.batch_id == batch_id]

    async def get_link(self, batch_id: UUID, animal_id: UUID) -> BatchAnimalLink | None:
        return next(
            (link for link in self.links if link.batch_id == batch_id and link.animal_id == animal_id),
            None,
        )

    async def add_link(self, link: BatchAnimalLink) -> BatchAnimalLink:
        _stamp(link)
        self.links.append(link)
        return link

    async def delete_link(self, link: BatchAnimalLink) -> None:
        self.links.remove(link)


class FakeFactorRepository:
    def __init__(self) -> None:
        self.definitions: list[ConsumptionBatchFactor] = []
        self.values: list[AnimalBatchFactor] = []
        self.upsert_calls = 0

    async def list_definitions(
        self, farm_id: UUID, include_inactive: bool = False
    ) -> list[ConsumptionBatchFactor]:
        rows = [
            f for f in self.definitions
            if f.farm_id == farm_id and (include_inactive or f.is_active)
        ]
        return sorted(rows, key=lambda f: (f.factor_type, f.factor_name))

    async def get_definition(self, farm_id: UUID, factor_id: UUID) -> ConsumptionBatchFactor | None:
        return next((f for f in self.definitions if f.farm_id == farm_id and f.id == factor_id), None)

    async def existing_definition_ids(self, farm_id: UUID, factor_ids: Iterable[UUID]) -> set[UUID]:
        wanted = set(factor_ids)
        return {f.id for f in self.definitions if f.farm_id == farm_id and f.id in wanted}

    async def add_definition(self, factor: ConsumptionBatchFactor) -> ConsumptionBatchFactor:
        _stamp(factor)
        self.definitions.append(factor)
        return factor

    async def save_definition(self, factor: ConsumptionBatchFactor) -> ConsumptionBatchFactor:
        _stamp(factor)
        return factor

    async def list_values(self, batch_id: UUID, animal_id: UUID | None = None) -> list[AnimalBatchFactor]:
        return [
            v for v in self.values
            if v.batch_id == batch_id and (animal_id is None or v.animal_id == animal_id)
        ]

    async def list_active_values(self, batch_id: UUID) -> list[AnimalBatchFactor]:
        active = {f.id for f in self.definitions if f.is_active}
        return [v for v in self.values if v.batch_id == batch_id and v.factor_id in active]

    async def upsert_values(
        self, farm_id: UUID, batch_id: UUID, entries: Sequence[tuple[UUID, UUID, str]]
    ) -> list[AnimalBatchFactor]:
        self.upsert_calls += 1
        saved = []
        for animal_id, factor_id, factor_value in entries:
            row = next(
                (
                    v for v in self.values
                    if v.batch_id == batch_id and v.animal_id == animal_id and v.factor_id == factor_id
                ),
                None,
            )
            if row is None:
                row = AnimalBatchFactor(
                    farm_id=farm_id,
                    batch_id=batch_id,
                    animal_id=animal_id,
                    factor_id=factor_id,
                    factor_value=factor_value,
                )
                self.values.append(row)
            else:
                row.factor_value = factor_value
            _stamp(row)
            saved.append(row)
        return saved


class FakeConversionRepository:
    def __init__(self) -> None:
        self.rows: list[WeightConversion] = []

    async def list_all(self, farm_id: UUID) -> list[WeightConversion]:
        rows = [c for c in self.rows if c.farm_id == farm_id]
        return sorted(rows, key=lambda c: (not c.is_default, c.unit_name))

    async def get(self, farm_id: UUID, conversion_id: UUID) -> WeightConversion | None:
        return next((c for c in self.rows if c.farm_id == farm_id and c.id == conversion_id), None)

    async def add(self, conversion: WeightConversion) -> WeightConversion:
        _stamp(conversion)
        self.rows.append(conversion)
        return conversion

    async def save(self, conversion: WeightConversion) -> WeightConversion:
        _stamp(conversion)
        return conversion

    async def delete(self, conversion: WeightConversion) -> None:
        self.rows.remove(conversion)


class FakeFeedCosts:
    def __init__(self, cost_per_kg: Decimal | None = None) -> None:
        self.cost = cost_per_kg
        self.fail = False

    async def cost_per_kg(self, farm_id: UUID, feed_type_category_ids: Sequence[UUID]) -> Decimal | None:
        if self.fail:
            raise DependencyError("Feed catalog unavailable", farm_id=str(farm_id))
        return self.cost if feed_type_category_ids else None


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def farm_id() -> UUID:
    return uuid4()


@pytest.fixture
def other_farm_id() -> UUID:
    return uuid4()


@pytest.fixture
def cache() -> TargetCache:
    return TargetCache(ttl_seconds=60)


@pytest.fixture
def animal_reader() -> FakeAnimalReader:
    return FakeAnimalReader()


@pytest.fixture
def category_repo() -> FakeCategoryRepository:
    return FakeCategoryRepository()


@pytest.fixture
def batch_repo() -> FakeBatchRepository:
    return FakeBatchRepository()


@pytest.fixture
def factor_repo() -> FakeFactorRepository:
    return FakeFactorRepository()


@pytest.fixture
def conversion_repo() -> FakeConversionRepository:
    return FakeConversionRepository()


@pytest.fixture
def feed_costs() -> FakeFeedCosts:
    return FakeFeedCosts(Decimal("0.40"))


@pytest.fixture
def category_service(category_repo, animal_reader, cache) -> CategoryService:
    return CategoryService(category_repo, animal_reader, cache, today=lambda: TODAY)


@pytest.fixture
def batch_service(batch_repo, category_repo, animal_reader, cache) -> BatchService:
    return BatchService(batch_repo, category_repo, animal_reader, cache, today=lambda: TODAY)


@pytest.fixture
def factor_service(factor_repo, batch_repo, animal_reader, cache) -> FactorService:
    return FactorService(factor_repo, batch_repo, animal_reader, cache)


@pytest.fixture
def conversion_service(conversion_repo) -> ConversionService:
    return ConversionService(conversion_repo)


@pytest.fixture
def insights_service(batch_service, factor_service, feed_costs, cache) -> InsightsService:
    return InsightsService(batch_service, factor_service, feed_costs, cache)


@pytest.fixture
def farm_defaults() -> FarmDefaults:
    return FarmDefaults.from_yaml(
        """
version: "test"
animal_categories:
  - name: Calves
    max_age_days: 180
    characteristics: {growth_phase: true}
  - name: Lactating Cows
    gender: female
    characteristics: {lactating: true}
weight_conversions:
  - {unit_name: Kilogram, unit_symbol: kg, conversion_to_kg: 1}
  - {unit_name: Pound, unit_symbol: lb, conversion_to_kg: 0.453592}
batch_factors:
  - {factor_name: Body Condition, factor_type: body_condition}
consumption_batches:
  - batch_name: Milking Herd
    animal_categories: [Lactating Cows]
    default_quantity_kg: 12
    feeding_times: ["06:00", "17:00"]
"""
    )


@pytest.fixture
def defaults_service(category_repo, conversion_repo, factor_repo, batch_repo, cache, farm_defaults) -> DefaultsService:
    return DefaultsService(
        category_repo,
        conversion_repo,
        factor_repo,
        batch_repo,
        cache,
        loader=lambda: farm_defaults,
    )


@pytest.fixture
async def client(
    cache,
    category_service,
    batch_service,
    factor_service,
    conversion_service,
    insights_service,
    defaults_service,
):
    """API client whose service dependencies run on the in-memory repositories."""
    from feed_engine.api import deps
    from feed_engine.main import app

    app.dependency_overrides.update(
        {
            deps.get_cache: lambda: cache,
            deps.get_category_service: lambda: category_service,
            deps.get_batch_service: lambda: batch_service,
            deps.get_factor_service: lambda: factor_service,
            deps.get_conversion_service: lambda: conversion_service,
            deps.get_insights_service: lambda: insights_service,
            deps.get_defaults_service: lambda: defaults_service,
        }
    )

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def animal_factory():
    """Factory building registry animal snapshots, see make_animal."""
    return make_animal
