"""Farm-level endpoints: defaults initialization and registry change notifications."""

from fastapi import APIRouter, status

from feed_engine.api.deps import Cache, Defaults, FarmId
from feed_engine.schemas.common import ApiResponse
from feed_engine.schemas.farm import FarmDefaultsResult
from feed_engine.services.batch_service import notify_animal_changed

router = APIRouter()


@router.post("/initialize", response_model=ApiResponse[FarmDefaultsResult])
async def initialize_farm(farm_id: FarmId, service: Defaults) -> ApiResponse[FarmDefaultsResult]:
    """Seed default categories, weight units and batch factors (idempotent)."""
    result = await service.initialize_farm_defaults(farm_id)
    return ApiResponse(
        data=result,
        message="Feed management settings initialized successfully",
    )


@router.post("/animals/changed", response_model=ApiResponse[None], status_code=status.HTTP_202_ACCEPTED)
async def animals_changed(farm_id: FarmId, cache: Cache) -> ApiResponse[None]:
    """Called by the animal registry after an animal of the farm was created or edited."""
    notify_animal_changed(farm_id, cache)
    return ApiResponse(message="Cached batch targets invalidated")
