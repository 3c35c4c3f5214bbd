from typing import Any, Mapping, Optional


class AppError(Exception):
    """Base class for errors raised by the application layers.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context
        code: optional machine-readable error code
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    default_message = "Application error"

    def __init__(self, message: Optional[str] = None, details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.code:
            payload["code"] = self.code
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(AppError):
    """Raised when caller input is invalid or a precondition for a service call is not met."""

    http_status = 400
    default_message = "Invalid input"


class NotFoundError(AppError):
    """Raised by the HTTP layer when a lookup by id yielded no record."""

    http_status = 404
    default_message = "Not found"


class ValidationError(AppError):
    """Raised when a storage row cannot be mapped into its canonical record.

    This signals a data-integrity problem, so handlers surface it as a server error.

    Attributes:
        entity: name of the entity being mapped (``"profile"``, ``"meal_entry"``...)
        row: the offending raw row, exactly as the storage layer returned it
    """

    http_status = 500
    default_message = "Invalid data format received from database"

    def __init__(self, entity: str, row: Optional[Mapping[str, Any]], message: Optional[str] = None, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message or f"Invalid {entity} row received from database", details, code="INVALID_ROW")
        self.entity = entity
        self.row = dict(row) if row is not None else None


class StorageError(AppError):
    """Raised when a statement or connection fails. Carries the driver's message."""

    http_status = 500
    default_message = "Database error"


class EmptyUpdateError(AppError):
    """Raised when a partial update is requested with no fields to change."""

    http_status = 400
    default_message = "No fields to update"


class InferenceError(AppError):
    """Raised when the food-recognition service fails or returns a malformed estimate."""

    http_status = 502
    default_message = "AI failed"
