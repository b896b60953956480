"""Tests for animal snapshots and derived flags."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from feed_engine.core.snapshot import AnimalSnapshot, snapshot_from_animal
from feed_engine.models.animal import Animal


def _row(**overrides) -> Animal:
    fields = {
        "id": uuid4(),
        "farm_id": uuid4(),
        "tag_number": "T-100",
        "gender": "female",
        "birth_date": date(2024, 1, 1),
        "status": "active",
        "production_status": None,
        "expected_calving_date": None,
        "weight": None,
    }
    fields.update(overrides)
    return Animal(**fields)


class TestSnapshotFromAnimal:
    def test_lactating_flag(self):
        snapshot = snapshot_from_animal(_row(production_status="lactating"))

        assert snapshot.lactating is True
        assert snapshot.pregnant is False

    @pytest.mark.parametrize(
        ("production_status", "expected_calving_date"),
        [("served", None), ("dry", date(2026, 9, 1))],
    )
    def test_pregnant_flag(self, production_status, expected_calving_date):
        snapshot = snapshot_from_animal(
            _row(production_status=production_status, expected_calving_date=expected_calving_date)
        )

        assert snapshot.pregnant is True

    def test_breeding_male_excludes_calves(self):
        bull = snapshot_from_animal(_row(gender="male", production_status=None))
        bull_calf = snapshot_from_animal(_row(gender="male", production_status="calf"))

        assert bull.breeding_male is True
        assert bull_calf.breeding_male is False

    @pytest.mark.parametrize(("production_status", "expected"), [("calf", True), ("heifer", True), ("dry", False)])
    def test_growth_phase(self, production_status, expected):
        assert snapshot_from_animal(_row(production_status=production_status)).growth_phase is expected

    def test_weight_is_float(self):
        assert snapshot_from_animal(_row(weight=Decimal("512.50"))).weight_kg == 512.5


class TestAnimalSnapshot:
    def test_age_days(self):
        snapshot = AnimalSnapshot(uuid4(), "T-1", "female", date(2026, 1, 1), None)

        assert snapshot.age_days(date(2026, 1, 31)) == 30

    def test_age_days_without_birth_date(self):
        snapshot = AnimalSnapshot(uuid4(), "T-1", "female", None, None)

        assert snapshot.age_days(date(2026, 1, 31)) is None

    def test_is_frozen(self):
        snapshot = AnimalSnapshot(uuid4(), "T-1", "female", None, None)

        with pytest.raises(AttributeError):
            snapshot.gender = "male"  # type: ignore[misc]

    def test_is_active(self):
        assert AnimalSnapshot(uuid4(), "T-1", "female", None, None).is_active is True
        assert AnimalSnapshot(uuid4(), "T-1", "female", None, None, status="sold").is_active is False
