"""Animal category endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from feed_engine.api.deps import Categories, FarmId
from feed_engine.schemas.animal import AnimalSnapshotRead, MatchingAnimalsRead
from feed_engine.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from feed_engine.schemas.common import ApiResponse

router = APIRouter()


@router.get("", response_model=ApiResponse[list[CategoryRead]])
async def list_categories(farm_id: FarmId, service: Categories) -> ApiResponse[list[CategoryRead]]:
    categories = await service.get_categories(farm_id)
    return ApiResponse(data=[CategoryRead.model_validate(c) for c in categories])


@router.post("", response_model=ApiResponse[CategoryRead], status_code=status.HTTP_201_CREATED)
async def create_category(
    farm_id: FarmId,
    payload: CategoryCreate,
    service: Categories,
) -> ApiResponse[CategoryRead]:
    category = await service.create_category(farm_id, payload)
    return ApiResponse(
        data=CategoryRead.model_validate(category),
        message="Animal category created successfully",
    )


@router.put("/{category_id}", response_model=ApiResponse[CategoryRead])
async def update_category(
    farm_id: FarmId,
    category_id: UUID,
    payload: CategoryUpdate,
    service: Categories,
) -> ApiResponse[CategoryRead]:
    category = await service.update_category(farm_id, category_id, payload)
    return ApiResponse(
        data=CategoryRead.model_validate(category),
        message="Animal category updated successfully",
    )


@router.delete("/{category_id}", response_model=ApiResponse[None])
async def delete_category(farm_id: FarmId, category_id: UUID, service: Categories) -> ApiResponse[None]:
    await service.delete_category(farm_id, category_id)
    return ApiResponse(message="Animal category deleted successfully")


@router.get("/{category_id}/matching-animals", response_model=ApiResponse[MatchingAnimalsRead])
async def matching_animals(
    farm_id: FarmId,
    category_id: UUID,
    service: Categories,
    limit: Annotated[int | None, Query(ge=1, description="Page size")] = None,
) -> ApiResponse[MatchingAnimalsRead]:
    """Active animals currently matching the category's criteria."""
    animals, total, applied_limit = await service.get_matching_animals(farm_id, category_id, limit)
    return ApiResponse(
        data=MatchingAnimalsRead(
            category_id=category_id,
            animals=[AnimalSnapshotRead.model_validate(a) for a in animals],
            total=total,
            limit=applied_limit,
        )
    )
