"""Weight conversion endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from feed_engine.api.deps import Conversions, FarmId
from feed_engine.schemas.common import ApiResponse
from feed_engine.schemas.conversion import (
    ConversionCreate,
    ConversionRead,
    ConversionUpdate,
    ConvertRequest,
    ConvertResponse,
)

router = APIRouter()


@router.get("", response_model=ApiResponse[list[ConversionRead]])
async def list_conversions(farm_id: FarmId, service: Conversions) -> ApiResponse[list[ConversionRead]]:
    conversions = await service.get_conversions(farm_id)
    return ApiResponse(data=[ConversionRead.model_validate(c) for c in conversions])


@router.post("", response_model=ApiResponse[ConversionRead], status_code=status.HTTP_201_CREATED)
async def create_conversion(
    farm_id: FarmId,
    payload: ConversionCreate,
    service: Conversions,
) -> ApiResponse[ConversionRead]:
    conversion = await service.create_conversion(farm_id, payload)
    return ApiResponse(
        data=ConversionRead.model_validate(conversion),
        message="Weight conversion created successfully",
    )


@router.post("/convert", response_model=ApiResponse[ConvertResponse])
async def convert(farm_id: FarmId, payload: ConvertRequest, service: Conversions) -> ApiResponse[ConvertResponse]:
    """Express a quantity given in one of the farm's units in kilograms."""
    quantity_kg = await service.convert(farm_id, payload.quantity, payload.unit_symbol)
    return ApiResponse(
        data=ConvertResponse(
            quantity=payload.quantity,
            unit_symbol=payload.unit_symbol,
            quantity_kg=quantity_kg,
        )
    )


@router.put("/{conversion_id}", response_model=ApiResponse[ConversionRead])
async def update_conversion(
    farm_id: FarmId,
    conversion_id: UUID,
    payload: ConversionUpdate,
    service: Conversions,
) -> ApiResponse[ConversionRead]:
    conversion = await service.update_conversion(farm_id, conversion_id, payload)
    return ApiResponse(
        data=ConversionRead.model_validate(conversion),
        message="Weight conversion updated successfully",
    )


@router.delete("/{conversion_id}", response_model=ApiResponse[None])
async def delete_conversion(farm_id: FarmId, conversion_id: UUID, service: Conversions) -> ApiResponse[None]:
    await service.delete_conversion(farm_id, conversion_id)
    return ApiResponse(message="Weight conversion deleted successfully")
