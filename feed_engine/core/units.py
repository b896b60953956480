"""Unit conversion table helpers."""

from collections.abc import Iterable
from decimal import Decimal

from feed_engine.core.errors import InvalidConversionValue, UnknownUnit
from feed_engine.models.weight_conversion import WeightConversion


def normalize_symbol(symbol: str) -> str:
    """Symbol comparison key: trimmed and case-folded."""
    return symbol.strip().casefold()


def validate_conversion_value(value: Decimal | float) -> Decimal:
    """Ensure a conversion factor is strictly positive."""
    parsed = Decimal(str(value))
    if not parsed.is_finite() or parsed <= 0:
        raise InvalidConversionValue(
            "Conversion value must be greater than 0",
            conversion_to_kg=str(value),
        )
    return parsed


def find_by_symbol(
    conversions: Iterable[WeightConversion],
    symbol: str,
) -> WeightConversion | None:
    """Case-insensitive symbol lookup."""
    key = normalize_symbol(symbol)
    for conversion in conversions:
        if normalize_symbol(conversion.unit_symbol) == key:
            return conversion
    return None


def to_kg(quantity: float, conversion: WeightConversion) -> float:
    return quantity * float(conversion.conversion_to_kg)


def from_kg(quantity_kg: float, conversion: WeightConversion) -> float:
    """Inverse of to_kg."""
    return quantity_kg / float(conversion.conversion_to_kg)


def convert(
    conversions: Iterable[WeightConversion],
    quantity: float,
    unit_symbol: str,
) -> float:
    """Convert a quantity expressed in unit_symbol to kilograms.

    Raises:
        UnknownUnit: If the symbol is not defined
    """
    conversion = find_by_symbol(conversions, unit_symbol)
    if conversion is None:
        raise UnknownUnit(
            f"Unknown weight unit: {unit_symbol}",
            unit_symbol=unit_symbol,
        )
    return to_kg(quantity, conversion)
