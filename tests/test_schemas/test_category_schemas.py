"""Tests for animal category and conversion schemas."""

import pytest
from pydantic import ValidationError

from feed_engine.schemas.category import CategoryCreate, CategoryUpdate
from feed_engine.schemas.common import ApiResponse, ErrorResponse
from feed_engine.schemas.farm import FarmDefaultsResult


class TestCategoryCreate:
    def test_name_is_stripped(self):
        assert CategoryCreate(name="  Dry Cows ").name == "Dry Cows"

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            CategoryCreate(name="   ")

    def test_unknown_production_status_rejected(self):
        with pytest.raises(ValidationError):
            CategoryCreate(name="X", production_status="retired")

    def test_unknown_characteristic_rejected(self):
        with pytest.raises(ValidationError):
            CategoryCreate(name="X", characteristics={"horned": True})

    def test_negative_age_rejected(self):
        with pytest.raises(ValidationError):
            CategoryCreate(name="X", min_age_days=-1)


class TestCategoryUpdate:
    def test_explicit_null_is_set(self):
        update = CategoryUpdate(gender=None)

        assert update.model_dump(exclude_unset=True) == {"gender": None}


class TestEnvelopes:
    def test_api_response_defaults(self):
        response = ApiResponse[int](data=3)

        assert response.model_dump() == {"success": True, "data": 3, "message": None}

    def test_error_response(self):
        error = ErrorResponse(error="Not found", error_type="NotFoundError")

        assert error.success is False
        assert error.detail is None

    def test_defaults_result_total(self):
        result = FarmDefaultsResult(version="1", categories_created=2, conversions_created=3, factors_created=1)

        assert result.total_created == 6
