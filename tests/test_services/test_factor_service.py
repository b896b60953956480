"""Tests for FactorService."""

from decimal import Decimal
from uuid import uuid4

import pytest

from feed_engine.core.errors import InvalidAnimalId, NotFoundError, ValidationError
from feed_engine.models.consumption_batch import ConsumptionBatch
from feed_engine.schemas.factor import BatchFactorCreate, BatchFactorUpdate, FactorUpdate


@pytest.fixture
async def batch(batch_repo, farm_id) -> ConsumptionBatch:
    return await batch_repo.add(
        ConsumptionBatch(
            farm_id=farm_id,
            batch_name="Milking herd",
            target_mode="specific",
            animal_category_ids=[],
            feed_type_category_ids=[],
            default_quantity_kg=Decimal("10"),
            feeding_frequency_per_day=2,
            feeding_times=[],
            is_active=True,
            is_preset=False,
        )
    )


@pytest.fixture
def cows(animal_reader, farm_id, animal_factory):
    animals = [animal_factory(farm_id, f"C-{i}") for i in range(2)]
    animal_reader.add(farm_id, *animals)
    return animals


@pytest.fixture
async def condition(factor_service, farm_id):
    return await factor_service.create_batch_factor(
        farm_id, BatchFactorCreate(factor_name="Body Condition", factor_type="body_condition")
    )


@pytest.fixture
async def yield_factor(factor_service, farm_id):
    return await factor_service.create_batch_factor(
        farm_id, BatchFactorCreate(factor_name="Milk Yield", factor_type="milk_production")
    )


def _entry(animal, factor, value) -> FactorUpdate:
    return FactorUpdate(animal_id=str(animal.animal_id), factor_id=str(factor.id), factor_value=value)


class TestFactorCatalogue:
    @pytest.mark.asyncio
    async def test_list_is_ordered_by_type_then_name(self, factor_service, farm_id, condition, yield_factor):
        factors = await factor_service.get_batch_factors(farm_id)

        assert [f.factor_name for f in factors] == ["Body Condition", "Milk Yield"]

    @pytest.mark.asyncio
    async def test_deactivated_factor_is_hidden(self, factor_service, farm_id, condition):
        await factor_service.update_batch_factor(farm_id, condition.id, BatchFactorUpdate(is_active=False))

        assert await factor_service.get_batch_factors(farm_id) == []

    @pytest.mark.asyncio
    async def test_update_unknown_factor(self, factor_service, farm_id):
        with pytest.raises(NotFoundError):
            await factor_service.update_batch_factor(farm_id, uuid4(), BatchFactorUpdate(description="x"))


class TestUpdateAnimalBatchFactors:
    @pytest.mark.asyncio
    async def test_upsert(self, factor_service, factor_repo, farm_id, batch, cows, condition):
        await factor_service.update_animal_batch_factors(farm_id, batch.id, [_entry(cows[0], condition, "1.2")])
        rows = await factor_service.update_animal_batch_factors(
            farm_id, batch.id, [_entry(cows[0], condition, 1.5)]
        )

        assert len(factor_repo.values) == 1
        assert rows[0].factor_value == "1.5"

    @pytest.mark.asyncio
    async def test_one_bad_entry_rejects_all(self, factor_service, factor_repo, farm_id, batch, cows, condition):
        updates = [
            _entry(cows[0], condition, "1.2"),
            _entry(cows[1], condition, "-3"),
        ]

        with pytest.raises(ValidationError):
            await factor_service.update_animal_batch_factors(farm_id, batch.id, updates)

        assert factor_repo.values == []
        assert factor_repo.upsert_calls == 0

    @pytest.mark.asyncio
    async def test_missing_field(self, factor_service, farm_id, batch, cows):
        with pytest.raises(ValidationError) as exc_info:
            await factor_service.update_animal_batch_factors(
                farm_id, batch.id, [FactorUpdate(animal_id=str(cows[0].animal_id), factor_value="1.1")]
            )

        assert exc_info.value.detail == {"index": 0, "missing": ["factor_id"]}

    @pytest.mark.asyncio
    async def test_malformed_animal_id(self, factor_service, farm_id, batch, condition):
        with pytest.raises(InvalidAnimalId):
            await factor_service.update_animal_batch_factors(
                farm_id,
                batch.id,
                [FactorUpdate(animal_id="cow-7", factor_id=str(condition.id), factor_value="1.1")],
            )

    @pytest.mark.asyncio
    async def test_unknown_animal(self, factor_service, factor_repo, farm_id, batch, condition, animal_factory):
        stranger = animal_factory(farm_id, "NOT-REGISTERED")

        with pytest.raises(NotFoundError):
            await factor_service.update_animal_batch_factors(farm_id, batch.id, [_entry(stranger, condition, "1.1")])

        assert factor_repo.upsert_calls == 0

    @pytest.mark.asyncio
    async def test_factor_of_other_farm(self, factor_service, factor_repo, farm_id, other_farm_id, batch, cows):
        foreign = await factor_service.create_batch_factor(other_farm_id, BatchFactorCreate(factor_name="Foreign"))

        with pytest.raises(NotFoundError):
            await factor_service.update_animal_batch_factors(farm_id, batch.id, [_entry(cows[0], foreign, "1.1")])

        assert factor_repo.values == []

    @pytest.mark.asyncio
    async def test_unknown_batch(self, factor_service, farm_id, cows, condition):
        with pytest.raises(NotFoundError):
            await factor_service.update_animal_batch_factors(farm_id, uuid4(), [_entry(cows[0], condition, "1.1")])


class TestReadFactors:
    @pytest.mark.asyncio
    async def test_filter_by_animal(self, factor_service, farm_id, batch, cows, condition):
        await factor_service.update_animal_batch_factors(
            farm_id,
            batch.id,
            [_entry(cows[0], condition, "1.1"), _entry(cows[1], condition, "0.9")],
        )

        rows = await factor_service.get_animal_batch_factors(farm_id, batch.id, str(cows[1].animal_id))

        assert [r.factor_value for r in rows] == ["0.9"]

    @pytest.mark.asyncio
    async def test_multipliers_combine_and_skip_inactive(
        self, factor_service, farm_id, batch, cows, condition, yield_factor
    ):
        await factor_service.update_animal_batch_factors(
            farm_id,
            batch.id,
            [_entry(cows[0], condition, "1.5"), _entry(cows[0], yield_factor, "1.2")],
        )
        assert (await factor_service.multipliers(batch.id))[cows[0].animal_id] == pytest.approx(1.8)

        await factor_service.update_batch_factor(farm_id, yield_factor.id, BatchFactorUpdate(is_active=False))

        multipliers = await factor_service.multipliers(batch.id)
        assert multipliers[cows[0].animal_id] == pytest.approx(1.5)
        assert cows[1].animal_id not in multipliers
