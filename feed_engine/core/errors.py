"""Feed engine error taxonomy.

Every error carries the HTTP status the API layer answers with, so
routes never translate exceptions one by one.
"""

from typing import Any


class FeedEngineError(Exception):
    """Base class for all feed engine errors."""

    status_code: int = 500

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail or None


class ValidationError(FeedEngineError):
    """Malformed input: missing field, out-of-range value, bad identifier."""

    status_code = 400


class InvalidAnimalId(ValidationError):
    """Animal identifier is not a valid UUID."""


class InvalidConversionValue(ValidationError):
    """conversion_to_kg is not strictly positive."""


class InvalidTargetMode(ValidationError):
    """Target mode is unknown or the operation does not apply to it."""


class NotFoundError(FeedEngineError):
    """Entity does not exist within the farm scope."""

    status_code = 404


class UnknownUnit(NotFoundError):
    """No weight conversion with the given symbol for the farm."""


class AnimalNotLinked(NotFoundError):
    """The animal has no specific link to the batch."""


class ConflictError(FeedEngineError):
    """Write rejected because of existing state."""

    status_code = 409


class DuplicateUnit(ConflictError):
    """A unit with the same symbol (ignoring case) already exists."""


class ProtectedDefault(ConflictError):
    """Default/preset rows cannot be deleted."""


class DependencyError(FeedEngineError):
    """A collaborator (animal registry, feed catalog) could not be reached."""

    status_code = 502
