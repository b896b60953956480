"""Tests for identifier parsing."""

from uuid import uuid4

import pytest

from feed_engine.core.errors import InvalidAnimalId, ValidationError
from feed_engine.core.identifiers import parse_animal_id, parse_uuid


def test_parse_animal_id_accepts_uuid_string():
    animal_id = uuid4()

    assert parse_animal_id(f" {animal_id} ") == animal_id


def test_parse_animal_id_passes_uuid_through():
    animal_id = uuid4()

    assert parse_animal_id(animal_id) is animal_id


@pytest.mark.parametrize("raw", ["", "123", "not-a-uuid"])
def test_parse_animal_id_rejects_garbage(raw):
    with pytest.raises(InvalidAnimalId) as exc_info:
        parse_animal_id(raw)

    assert exc_info.value.status_code == 400


def test_parse_uuid_names_the_field():
    with pytest.raises(ValidationError) as exc_info:
        parse_uuid("nope", "factor_id")

    assert exc_info.value.detail == {"factor_id": "nope"}
