"""
Meal entry mapper.
Translates between ``meal_entries`` rows (``meal_type``, ``protein_g``...) and
canonical MealEntry records (``meal_type``, ``protein``...).
"""

from typing import Any, List, Mapping, Optional, Tuple

from domain import fields
from domain.enums import MealType
from domain.mappers.record_mapper import map_row, update_pairs, write_arguments
from domain.schemas.meal_schemas import MealEntry

MEAL_ENTITY = "meal_entry"


def _meal_type_argument(value: Any) -> str:
    return MealType.parse(value).value


# storage column -> canonical field
MEAL_READ_COLUMNS = (
    ("id", "id", fields.required_text),
    ("user_id", "user_id", fields.required_text),
    ("name", "name", fields.required_text),
    ("meal_type", "meal_type", MealType.parse),
    ("meal_time", "meal_time", fields.time_of_day),
    ("meal_date", "meal_date", fields.calendar_date),
    ("calories", "calories", fields.number_or_zero),
    ("protein_g", "protein", fields.number_or_zero),
    ("carbs_g", "carbs", fields.number_or_zero),
    ("fat_g", "fat", fields.number_or_zero),
    ("sugar_g", "sugar", fields.number_or_zero),
    ("image_url", "image_url", fields.optional_image_reference),
    ("notes", "notes", fields.optional_text),
    ("created_at", "created_at", fields.timestamp),
)

# canonical field -> storage column
MEAL_WRITE_COLUMNS = (
    ("user_id", "user_id", fields.passthrough),
    ("name", "name", fields.passthrough),
    ("meal_type", "meal_type", _meal_type_argument),
    ("meal_time", "meal_time", fields.time_argument),
    ("meal_date", "meal_date", fields.date_argument),
    ("calories", "calories", fields.zero_if_missing),
    ("protein", "protein_g", fields.zero_if_missing),
    ("carbs", "carbs_g", fields.zero_if_missing),
    ("fat", "fat_g", fields.zero_if_missing),
    ("sugar", "sugar_g", fields.zero_if_missing),
    ("image_url", "image_url", fields.image_argument),
    ("notes", "notes", fields.passthrough),
)

# user_id is fixed once the meal exists
MEAL_UPDATE_COLUMNS = tuple(column for column in MEAL_WRITE_COLUMNS if column[0] != "user_id")


class MealMapper:
    """Mapper for meal entry rows."""

    @staticmethod
    def from_row(row: Optional[Mapping[str, Any]]) -> MealEntry:
        """
        Convert a raw ``meal_entries`` row into a validated MealEntry.

        Date columns are reduced to ``YYYY-MM-DD``, numeric text becomes
        floats, NULL macros become 0 and inline image payloads become absent.

        Raises:
            ValidationError: if the row cannot be coerced or validated
        """
        return map_row(MEAL_ENTITY, row, MEAL_READ_COLUMNS, MealEntry)

    @staticmethod
    def to_write_args(values: Mapping[str, Any]) -> dict:
        return write_arguments(values, MEAL_WRITE_COLUMNS)

    @staticmethod
    def to_update_pairs(changes: Mapping[str, Any]) -> List[Tuple[str, Any]]:
        return update_pairs(changes, MEAL_UPDATE_COLUMNS)
