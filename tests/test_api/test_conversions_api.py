"""Tests for the weight conversion and farm endpoints."""

import pytest
from httpx import AsyncClient


def _url(farm_id, suffix: str = "") -> str:
    return f"/farms/{farm_id}/feed-management/weight-conversions{suffix}"


class TestConversionEndpoints:
    @pytest.mark.asyncio
    async def test_create_convert_delete(self, client: AsyncClient, farm_id):
        created = await client.post(
            _url(farm_id),
            json={"unit_name": "Sack", "unit_symbol": "sack", "conversion_to_kg": "25"},
        )
        assert created.status_code == 201

        converted = await client.post(_url(farm_id, "/convert"), json={"quantity": 2, "unit_symbol": "SACK"})
        assert converted.status_code == 200
        assert converted.json()["data"]["quantity_kg"] == pytest.approx(50.0)

        deleted = await client.delete(_url(farm_id, f"/{created.json()['data']['id']}"))
        assert deleted.status_code == 200

    @pytest.mark.asyncio
    async def test_duplicate_symbol(self, client: AsyncClient, farm_id):
        await client.post(_url(farm_id), json={"unit_name": "Kilogram", "unit_symbol": "kg", "conversion_to_kg": 1})

        response = await client.post(
            _url(farm_id), json={"unit_name": "Kilo", "unit_symbol": "Kg", "conversion_to_kg": 1}
        )

        assert response.status_code == 409
        assert response.json()["error_type"] == "DuplicateUnit"

    @pytest.mark.asyncio
    async def test_zero_conversion_value(self, client: AsyncClient, farm_id):
        response = await client.post(_url(farm_id), json={"unit_name": "Zero", "unit_symbol": "z", "conversion_to_kg": 0})

        assert response.status_code == 400
        assert response.json()["error_type"] == "InvalidConversionValue"

    @pytest.mark.asyncio
    async def test_unknown_unit(self, client: AsyncClient, farm_id):
        response = await client.post(_url(farm_id, "/convert"), json={"quantity": 1, "unit_symbol": "stone"})

        assert response.status_code == 404
        assert response.json()["error_type"] == "UnknownUnit"


class TestFarmEndpoints:
    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, client: AsyncClient, farm_id):
        first = await client.post(f"/farms/{farm_id}/feed-management/initialize")
        second = await client.post(f"/farms/{farm_id}/feed-management/initialize")

        assert first.status_code == 200
        assert first.json()["data"]["conversions_created"] == 2
        assert second.json()["data"]["conversions_created"] == 0

        units = await client.get(_url(farm_id))
        assert {u["unit_symbol"] for u in units.json()["data"]} == {"kg", "lb"}

    @pytest.mark.asyncio
    async def test_default_unit_cannot_be_deleted(self, client: AsyncClient, farm_id):
        await client.post(f"/farms/{farm_id}/feed-management/initialize")
        kilogram = next(
            u for u in (await client.get(_url(farm_id))).json()["data"] if u["unit_symbol"] == "kg"
        )

        response = await client.delete(_url(farm_id, f"/{kilogram['id']}"))

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_animals_changed_invalidates_cache(self, client: AsyncClient, farm_id, cache):
        from uuid import uuid4

        batch_id = uuid4()
        cache.set(farm_id, batch_id, "targets", [])

        response = await client.post(f"/farms/{farm_id}/feed-management/animals/changed")

        assert response.status_code == 202
        assert cache.get(farm_id, batch_id, "targets") is None

    @pytest.mark.asyncio
    async def test_malformed_farm_id(self, client: AsyncClient):
        response = await client.get("/farms/not-a-farm/feed-management/weight-conversions")

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_initialize_creates_protected_presets(self, client: AsyncClient, farm_id):
        result = (await client.post(f"/farms/{farm_id}/feed-management/initialize")).json()["data"]
        assert result["batches_created"] == 1

        batches = (await client.get(f"/farms/{farm_id}/feed-management/consumption-batches")).json()["data"]
        assert batches[0]["is_preset"] is True

        response = await client.delete(f"/farms/{farm_id}/feed-management/consumption-batches/{batches[0]['id']}")
        assert response.status_code == 409
        assert response.json()["error_type"] == "ProtectedDefault"
