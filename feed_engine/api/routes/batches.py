"""Consumption batch endpoints: batches, membership, factor values and insights."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from feed_engine.api.deps import Batches, Factors, FarmId, Insights
from feed_engine.schemas.batch import (
    AddAnimalRequest,
    BatchAnimalLinkRead,
    BatchCreate,
    BatchRead,
    BatchTargetsRead,
    BatchUpdate,
)
from feed_engine.schemas.common import ApiResponse
from feed_engine.schemas.factor import AnimalBatchFactorRead, FactorUpdateRequest
from feed_engine.schemas.insights import BatchInsightsRead

router = APIRouter()


@router.get("", response_model=ApiResponse[list[BatchRead]])
async def list_batches(farm_id: FarmId, service: Batches) -> ApiResponse[list[BatchRead]]:
    """Active batches, presets first."""
    batches = await service.get_batches(farm_id)
    return ApiResponse(data=[BatchRead.model_validate(b) for b in batches])


@router.post("", response_model=ApiResponse[BatchRead], status_code=status.HTTP_201_CREATED)
async def create_batch(farm_id: FarmId, payload: BatchCreate, service: Batches) -> ApiResponse[BatchRead]:
    batch = await service.create_batch(farm_id, payload)
    return ApiResponse(data=BatchRead.model_validate(batch), message="Consumption batch created successfully")


@router.put("/{batch_id}", response_model=ApiResponse[BatchRead])
async def update_batch(
    farm_id: FarmId,
    batch_id: UUID,
    payload: BatchUpdate,
    service: Batches,
) -> ApiResponse[BatchRead]:
    batch = await service.update_batch(farm_id, batch_id, payload)
    return ApiResponse(data=BatchRead.model_validate(batch), message="Consumption batch updated successfully")


@router.delete("/{batch_id}", response_model=ApiResponse[None])
async def delete_batch(farm_id: FarmId, batch_id: UUID, service: Batches) -> ApiResponse[None]:
    await service.delete_batch(farm_id, batch_id)
    return ApiResponse(message="Consumption batch deleted successfully")


# =============================================================================
# Membership
# =============================================================================


@router.get("/{batch_id}/animals", response_model=ApiResponse[BatchTargetsRead])
async def batch_targets(
    farm_id: FarmId,
    batch_id: UUID,
    service: Batches,
    include_available: Annotated[bool, Query(description="Also list untargeted active animals")] = False,
) -> ApiResponse[BatchTargetsRead]:
    targets = await service.get_batch_targets(farm_id, batch_id, include_available)
    return ApiResponse(data=targets)


@router.post(
    "/{batch_id}/animals",
    response_model=ApiResponse[BatchAnimalLinkRead],
    status_code=status.HTTP_201_CREATED,
)
async def add_animal(
    farm_id: FarmId,
    batch_id: UUID,
    payload: AddAnimalRequest,
    service: Batches,
) -> ApiResponse[BatchAnimalLinkRead]:
    link = await service.add_animal_to_batch(farm_id, batch_id, payload.animal_id)
    return ApiResponse(data=BatchAnimalLinkRead.model_validate(link), message="Animal added to batch successfully")


@router.delete("/{batch_id}/animals/{animal_id}", response_model=ApiResponse[None])
async def remove_animal(
    farm_id: FarmId,
    batch_id: UUID,
    animal_id: str,
    service: Batches,
) -> ApiResponse[None]:
    await service.remove_animal_from_batch(farm_id, batch_id, animal_id)
    return ApiResponse(message="Animal removed from batch successfully")


# =============================================================================
# Factor values
# =============================================================================


@router.get("/{batch_id}/factors", response_model=ApiResponse[list[AnimalBatchFactorRead]])
async def list_factor_values(
    farm_id: FarmId,
    batch_id: UUID,
    service: Factors,
    animal_id: Annotated[str | None, Query(description="Restrict to one animal")] = None,
) -> ApiResponse[list[AnimalBatchFactorRead]]:
    rows = await service.get_animal_batch_factors(farm_id, batch_id, animal_id)
    return ApiResponse(data=[AnimalBatchFactorRead.model_validate(r) for r in rows])


@router.put("/{batch_id}/factors", response_model=ApiResponse[list[AnimalBatchFactorRead]])
async def update_factor_values(
    farm_id: FarmId,
    batch_id: UUID,
    payload: FactorUpdateRequest,
    service: Factors,
) -> ApiResponse[list[AnimalBatchFactorRead]]:
    """Upsert factor values; the whole set is rejected if any entry is invalid."""
    rows = await service.update_animal_batch_factors(farm_id, batch_id, payload.factors)
    return ApiResponse(
        data=[AnimalBatchFactorRead.model_validate(r) for r in rows],
        message="Animal batch factors updated successfully",
    )


# =============================================================================
# Insights
# =============================================================================


@router.get("/{batch_id}/insights", response_model=ApiResponse[BatchInsightsRead])
async def batch_insights(farm_id: FarmId, batch_id: UUID, service: Insights) -> ApiResponse[BatchInsightsRead]:
    insights = await service.get_batch_insights(farm_id, batch_id)
    return ApiResponse(data=BatchInsightsRead.model_validate(insights))
