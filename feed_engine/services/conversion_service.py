"""Conversion service - farm weight units."""

from uuid import UUID

from feed_engine.core.errors import DuplicateUnit, NotFoundError, ProtectedDefault
from feed_engine.core.units import convert, find_by_symbol, normalize_symbol, validate_conversion_value
from feed_engine.infra.logging import get_logger
from feed_engine.models.weight_conversion import WeightConversion
from feed_engine.repositories.conversions import ConversionRepository
from feed_engine.schemas.conversion import ConversionCreate, ConversionUpdate

logger = get_logger(__name__)


class ConversionService:
    """Weight conversion table of a farm."""

    def __init__(self, conversions: ConversionRepository) -> None:
        self.conversions = conversions

    async def get_conversions(self, farm_id: UUID) -> list[WeightConversion]:
        return await self.conversions.list_all(farm_id)

    async def create_conversion(self, farm_id: UUID, data: ConversionCreate) -> WeightConversion:
        """Add a unit.

        Raises:
            InvalidConversionValue: If conversion_to_kg is not greater than 0
            DuplicateUnit: If the symbol already exists in the farm (ignoring case)
        """
        value = validate_conversion_value(data.conversion_to_kg)
        existing = await self.conversions.list_all(farm_id)
        if find_by_symbol(existing, data.unit_symbol) is not None:
            raise DuplicateUnit("Unit symbol already exists", unit_symbol=data.unit_symbol)

        conversion = await self.conversions.add(
            WeightConversion(
                farm_id=farm_id,
                unit_name=data.unit_name,
                unit_symbol=data.unit_symbol,
                conversion_to_kg=value,
                description=data.description,
                is_default=False,
            )
        )
        logger.info(
            "Weight conversion created",
            farm_id=str(farm_id),
            unit_symbol=conversion.unit_symbol,
            conversion_to_kg=str(value),
        )
        return conversion

    async def update_conversion(
        self,
        farm_id: UUID,
        conversion_id: UUID,
        data: ConversionUpdate,
    ) -> WeightConversion:
        """Edit a unit; default units are editable too."""
        conversion = await self._get(farm_id, conversion_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("conversion_to_kg") is not None:
            changes["conversion_to_kg"] = validate_conversion_value(changes["conversion_to_kg"])

        symbol = changes.get("unit_symbol")
        if symbol is not None and normalize_symbol(symbol) != normalize_symbol(conversion.unit_symbol):
            others = [c for c in await self.conversions.list_all(farm_id) if c.id != conversion.id]
            if find_by_symbol(others, symbol) is not None:
                raise DuplicateUnit("Unit symbol already exists", unit_symbol=symbol)

        for field, value in changes.items():
            if value is None and field != "description":
                continue
            setattr(conversion, field, value)

        conversion = await self.conversions.save(conversion)
        logger.info(
            "Weight conversion updated",
            farm_id=str(farm_id),
            conversion_id=str(conversion_id),
            fields=sorted(data.model_fields_set),
        )
        return conversion

    async def delete_conversion(self, farm_id: UUID, conversion_id: UUID) -> None:
        """Delete a unit.

        Raises:
            ProtectedDefault: If the unit is a farm default
        """
        conversion = await self._get(farm_id, conversion_id)
        if conversion.is_default:
            raise ProtectedDefault(
                "Default weight conversions cannot be deleted",
                unit_symbol=conversion.unit_symbol,
            )

        await self.conversions.delete(conversion)
        logger.info("Weight conversion deleted", farm_id=str(farm_id), unit_symbol=conversion.unit_symbol)

    async def convert(self, farm_id: UUID, quantity: float, unit_symbol: str) -> float:
        """Quantity in unit_symbol expressed in kilograms.

        Raises:
            UnknownUnit: If the farm has no unit with that symbol
        """
        return convert(await self.conversions.list_all(farm_id), quantity, unit_symbol)

    async def _get(self, farm_id: UUID, conversion_id: UUID) -> WeightConversion:
        conversion = await self.conversions.get(farm_id, conversion_id)
        if conversion is None:
            raise NotFoundError("Weight conversion not found", conversion_id=str(conversion_id))
        return conversion
