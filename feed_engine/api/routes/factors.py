"""Batch factor catalogue endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from feed_engine.api.deps import Factors, FarmId
from feed_engine.schemas.common import ApiResponse
from feed_engine.schemas.factor import BatchFactorCreate, BatchFactorRead, BatchFactorUpdate

router = APIRouter()


@router.get("", response_model=ApiResponse[list[BatchFactorRead]])
async def list_batch_factors(farm_id: FarmId, service: Factors) -> ApiResponse[list[BatchFactorRead]]:
    """Active factor definitions ordered by type and name."""
    factors = await service.get_batch_factors(farm_id)
    return ApiResponse(data=[BatchFactorRead.model_validate(f) for f in factors])


@router.post("", response_model=ApiResponse[BatchFactorRead], status_code=status.HTTP_201_CREATED)
async def create_batch_factor(
    farm_id: FarmId,
    payload: BatchFactorCreate,
    service: Factors,
) -> ApiResponse[BatchFactorRead]:
    factor = await service.create_batch_factor(farm_id, payload)
    return ApiResponse(data=BatchFactorRead.model_validate(factor), message="Batch factor created successfully")


@router.put("/{factor_id}", response_model=ApiResponse[BatchFactorRead])
async def update_batch_factor(
    farm_id: FarmId,
    factor_id: UUID,
    payload: BatchFactorUpdate,
    service: Factors,
) -> ApiResponse[BatchFactorRead]:
    factor = await service.update_batch_factor(farm_id, factor_id, payload)
    return ApiResponse(data=BatchFactorRead.model_validate(factor), message="Batch factor updated successfully")
