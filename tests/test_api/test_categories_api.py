"""Tests for the animal category endpoints."""

import pytest
from httpx import AsyncClient


def _url(farm_id, suffix: str = "") -> str:
    return f"/farms/{farm_id}/feed-management/animal-categories{suffix}"


class TestCategoryEndpoints:
    @pytest.mark.asyncio
    async def test_create_and_list(self, client: AsyncClient, farm_id):
        response = await client.post(
            _url(farm_id),
            json={"name": "Lactating Cows", "gender": "female", "characteristics": {"lactating": True}},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["characteristics"] == {"lactating": True}
        assert body["message"] == "Animal category created successfully"

        listing = await client.get(_url(farm_id))
        assert [c["name"] for c in listing.json()["data"]] == ["Lactating Cows"]

    @pytest.mark.asyncio
    async def test_duplicate_name_is_conflict(self, client: AsyncClient, farm_id):
        await client.post(_url(farm_id), json={"name": "Calves"})

        response = await client.post(_url(farm_id), json={"name": "CALVES"})

        assert response.status_code == 409
        body = response.json()
        assert body["success"] is False
        assert body["error_type"] == "ConflictError"

    @pytest.mark.asyncio
    async def test_inverted_age_bounds_is_bad_request(self, client: AsyncClient, farm_id):
        response = await client.post(_url(farm_id), json={"name": "Bad", "min_age_days": 10, "max_age_days": 1})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_gender_is_rejected_by_schema(self, client: AsyncClient, farm_id):
        response = await client.post(_url(farm_id), json={"name": "Bad", "gender": "other"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_update_and_delete(self, client: AsyncClient, farm_id):
        created = (await client.post(_url(farm_id), json={"name": "Calves"})).json()["data"]

        updated = await client.put(_url(farm_id, f"/{created['id']}"), json={"max_age_days": 180})
        assert updated.status_code == 200
        assert updated.json()["data"]["max_age_days"] == 180

        deleted = await client.delete(_url(farm_id, f"/{created['id']}"))
        assert deleted.status_code == 200
        assert (await client.get(_url(farm_id))).json()["data"] == []

    @pytest.mark.asyncio
    async def test_delete_default_is_conflict(self, client: AsyncClient, farm_id, category_repo):
        created = (await client.post(_url(farm_id), json={"name": "Calves"})).json()["data"]
        category_repo.rows[0].is_default = True

        response = await client.delete(_url(farm_id, f"/{created['id']}"))

        assert response.status_code == 409
        assert response.json()["error_type"] == "ProtectedDefault"

    @pytest.mark.asyncio
    async def test_matching_animals(self, client: AsyncClient, farm_id, animal_reader, animal_factory):
        animal_reader.add(
            farm_id,
            animal_factory(farm_id, "C-1", production_status="lactating"),
            animal_factory(farm_id, "C-2", production_status="dry"),
        )
        created = (await client.post(_url(farm_id), json={"name": "Dry", "production_status": "dry"})).json()["data"]

        response = await client.get(_url(farm_id, f"/{created['id']}/matching-animals"), params={"limit": 10})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total"] == 1
        assert data["limit"] == 10
        assert data["animals"][0]["tag_number"] == "C-2"

    @pytest.mark.asyncio
    async def test_unknown_category_is_not_found(self, client: AsyncClient, farm_id):
        response = await client.get(_url(farm_id, "/00000000-0000-0000-0000-000000000000/matching-animals"))

        assert response.status_code == 404
