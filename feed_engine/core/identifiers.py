"""Identifier parsing for ids that arrive as free-form strings."""

from uuid import UUID

from feed_engine.core.errors import InvalidAnimalId, ValidationError


def parse_animal_id(value: str | UUID) -> UUID:
    """Parse an animal id.

    Raises:
        InvalidAnimalId: If the value is not a UUID
    """
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value).strip())
    except (ValueError, AttributeError):
        raise InvalidAnimalId("Invalid animal ID format", animal_id=str(value)) from None


def parse_uuid(value: str | UUID, field: str) -> UUID:
    """Parse any other identifier, reporting the field name on failure."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value).strip())
    except (ValueError, AttributeError):
        raise ValidationError(f"Invalid {field} format", **{field: str(value)}) from None
