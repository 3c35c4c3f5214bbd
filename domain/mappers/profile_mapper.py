"""
Profile and weight-history mappers.
Convert raw ``users`` / ``weight_history`` rows into canonical records and
canonical values back into statement arguments.
"""

from typing import Any, List, Mapping, Optional, Tuple

from domain import fields
from domain.mappers.record_mapper import map_row, update_pairs, write_arguments
from domain.schemas.profile_schemas import Profile, WeightHistoryEntry

PROFILE_ENTITY = "profile"
WEIGHT_HISTORY_ENTITY = "weight_history"

# storage column -> canonical field
PROFILE_READ_COLUMNS = (
    ("id", "id", fields.required_text),
    ("email", "email", fields.required_text),
    ("name", "name", fields.required_text),
    ("gender", "gender", fields.optional_text),
    ("date_of_birth", "date_of_birth", fields.optional_calendar_date),
    ("height", "height", fields.optional_integer),
    ("weight", "weight", fields.optional_number),
    ("goal", "goal", fields.optional_text),
    ("photo_url", "photo_url", fields.optional_image_reference),
    ("daily_calories", "daily_calories", fields.optional_integer),
    ("daily_protein", "daily_protein", fields.optional_integer),
    ("daily_carbs", "daily_carbs", fields.optional_integer),
    ("daily_sugar", "daily_sugar", fields.optional_integer),
    ("created_at", "created_at", fields.timestamp),
    ("updated_at", "updated_at", fields.timestamp),
)

# canonical field -> storage column (id is bound separately on updates)
PROFILE_WRITE_COLUMNS = (
    ("email", "email", fields.passthrough),
    ("name", "name", fields.passthrough),
    ("gender", "gender", fields.passthrough),
    ("date_of_birth", "date_of_birth", fields.date_argument),
    ("height", "height", fields.passthrough),
    ("weight", "weight", fields.passthrough),
    ("goal", "goal", fields.passthrough),
    ("photo_url", "photo_url", fields.image_argument),
    ("daily_calories", "daily_calories", fields.passthrough),
    ("daily_protein", "daily_protein", fields.passthrough),
    ("daily_carbs", "daily_carbs", fields.passthrough),
    ("daily_sugar", "daily_sugar", fields.passthrough),
)

WEIGHT_HISTORY_READ_COLUMNS = (
    ("id", "id", fields.required_text),
    ("user_id", "user_id", fields.required_text),
    ("weight", "weight", fields.parse_number),
    ("date", "date", fields.calendar_date),
    ("created_at", "created_at", fields.timestamp),
)

WEIGHT_HISTORY_WRITE_COLUMNS = (
    ("user_id", "user_id", fields.passthrough),
    ("weight", "weight", fields.passthrough),
    ("date", "date", fields.date_argument),
)


class ProfileMapper:
    """Mapper for profile rows."""

    @staticmethod
    def from_row(row: Optional[Mapping[str, Any]]) -> Profile:
        """
        Convert a raw ``users`` row into a validated Profile.

        Raises:
            ValidationError: if the row cannot be coerced or validated
        """
        return map_row(PROFILE_ENTITY, row, PROFILE_READ_COLUMNS, Profile)

    @staticmethod
    def to_write_args(profile_id: str, values: Mapping[str, Any]) -> dict:
        """Insert/upsert arguments keyed by storage column, including the id."""
        args = write_arguments(values, PROFILE_WRITE_COLUMNS)
        args["id"] = profile_id
        return args

    @staticmethod
    def to_update_pairs(changes: Mapping[str, Any]) -> List[Tuple[str, Any]]:
        return update_pairs(changes, PROFILE_WRITE_COLUMNS)


class WeightHistoryMapper:
    """Mapper for weight-history rows."""

    @staticmethod
    def from_row(row: Optional[Mapping[str, Any]]) -> WeightHistoryEntry:
        return map_row(
            WEIGHT_HISTORY_ENTITY, row, WEIGHT_HISTORY_READ_COLUMNS, WeightHistoryEntry
        )

    @staticmethod
    def to_write_args(values: Mapping[str, Any]) -> dict:
        return write_arguments(values, WEIGHT_HISTORY_WRITE_COLUMNS)
