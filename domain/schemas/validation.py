"""
Turn untyped service input into request schemas.
"""

from typing import Any, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.exceptions import ServiceValidationError

SchemaType = TypeVar("SchemaType", bound=BaseModel)


def validate_payload(schema: Type[SchemaType], payload: Any) -> SchemaType:
    """Return ``payload`` as ``schema``, validating mappings on the way.

    Raises:
        ServiceValidationError: with the field errors, if validation fails
    """
    if isinstance(payload, schema):
        return payload
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        raise ServiceValidationError(
            f"Invalid {schema.__name__} payload",
            details={"errors": exc.errors(include_url=False, include_context=False)},
            code="INVALID_PAYLOAD",
        ) from exc
