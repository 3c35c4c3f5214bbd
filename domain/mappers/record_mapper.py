"""
Table-driven row mapping shared by the per-entity mappers.

Each entity declares two explicit tables:

* a read table of ``(storage column, canonical field, coercion)`` triples used
  to turn a raw storage row into its canonical record, and
* a write table of ``(canonical field, storage column, conversion)`` triples
  used to turn canonical values into bindable statement arguments.

Column names are never derived from field names.
"""

import logging
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.exceptions import ValidationError
from domain.fields import UNSET

logger = logging.getLogger("nutrilog.mapping")

RecordType = TypeVar("RecordType", bound=BaseModel)
ColumnSpec = Tuple[str, str, Callable[[Any], Any]]


def map_row(
    entity: str,
    row: Optional[Mapping[str, Any]],
    read_table: Iterable[ColumnSpec],
    model: Type[RecordType],
) -> RecordType:
    """Coerce every column named in ``read_table`` and validate the result.

    Raises:
        ValidationError: if the row is missing, a column cannot be coerced, or
            the coerced values violate the canonical model.
    """
    if row is None:
        raise ValidationError(entity, None, f"No {entity} row to map")

    values: dict = {}
    for column, field, coerce in read_table:
        try:
            values[field] = coerce(row.get(column))
        except (TypeError, ValueError) as exc:
            logger.error(f"row_mapping_failed entity={entity} column={column} error={exc} row={dict(row)}")
            raise ValidationError(
                entity,
                row,
                f"Invalid value for {entity} column '{column}'",
                details={"column": column, "error": str(exc)},
            ) from exc

    try:
        return model.model_validate(values)
    except PydanticValidationError as exc:
        errors = exc.errors(include_url=False, include_context=False)
        logger.error(f"row_validation_failed entity={entity} errors={errors} row={dict(row)}")
        raise ValidationError(entity, row, details={"errors": errors}) from exc


def write_arguments(
    values: Mapping[str, Any], write_table: Iterable[ColumnSpec]
) -> dict:
    """Statement arguments for every column in ``write_table``.

    Fields missing from ``values`` are bound through their conversion as None.
    """
    return {
        column: convert(values.get(field))
        for field, column, convert in write_table
    }


def update_pairs(
    changes: Mapping[str, Any], write_table: Iterable[ColumnSpec]
) -> List[Tuple[str, Any]]:
    """One ``(column, value)`` pair per writable column, in table order.

    Columns whose field is not in ``changes`` carry ``UNSET`` and are skipped
    by the statement builder.
    """
    return [
        (column, convert(changes[field]) if field in changes else UNSET)
        for field, column, convert in write_table
    ]
