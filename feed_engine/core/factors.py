"""Factor engine - per-animal ration multipliers.

Several active factors on the same (batch, animal) pair combine by
multiplication; a pair without factor values has the neutral
multiplier 1.0.
"""

from collections.abc import Iterable
from decimal import Decimal, InvalidOperation

from feed_engine.core.errors import ValidationError
from feed_engine.infra.logging import get_logger

logger = get_logger(__name__)

NEUTRAL_MULTIPLIER = 1.0

# Width of animal_batch_factors.factor_value
MAX_FACTOR_VALUE_LENGTH = 50


def parse_factor_value(value: str | float | int) -> Decimal:
    """Parse a user-supplied factor value as a positive decimal.

    The value must also fit the stored column once normalized.

    Raises:
        ValidationError: If the value is not a finite number greater than zero,
            or is longer than MAX_FACTOR_VALUE_LENGTH characters
    """
    text = str(value).strip()
    if isinstance(value, bool) or len(text) > MAX_FACTOR_VALUE_LENGTH:
        raise ValidationError(
            "Factor value must be a positive decimal number",
            factor_value=text[:MAX_FACTOR_VALUE_LENGTH],
        )

    try:
        parsed = Decimal(text)
    except (InvalidOperation, ValueError):
        raise ValidationError(
            "Factor value must be a positive decimal number",
            factor_value=text,
        ) from None

    if not parsed.is_finite() or parsed <= 0 or len(str(parsed)) > MAX_FACTOR_VALUE_LENGTH:
        raise ValidationError(
            "Factor value must be a positive decimal number",
            factor_value=text,
        )
    return parsed


def effective_multiplier(factor_values: Iterable[str]) -> float:
    """Product of stored factor values.

    Values were validated when written; a stored value that no longer
    reads as a number is skipped (treated as 1.0) and logged.
    """
    product = Decimal(1)
    for raw in factor_values:
        try:
            product *= Decimal(str(raw).strip())
        except InvalidOperation:
            logger.warning("Unreadable factor value ignored", factor_value=raw)
    return float(product)


def effective_ration_kg(default_quantity_kg: Decimal | float, multiplier: float) -> float:
    """Per-feeding ration of one animal in a batch."""
    return float(default_quantity_kg) * multiplier
