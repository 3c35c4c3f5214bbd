"""
Sanitization and merge policy for profile writes.

Every optional profile field belongs to one category, and every category maps
invalid input to absence (None) instead of rejecting it:

* integer  -- height and the four daily targets: rounded, strictly positive
* decimal  -- weight: strictly positive, not rounded
* string   -- gender, goal: non-blank text that fits its column
* date     -- birth date: ISO calendar date, time-of-day dropped
* url      -- avatar: an absolute URL, never an inline payload

The merge policy says which columns a conflicting upsert overwrites and which
it only fills when the incoming sanitized value is present.
"""

import enum
import math
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional

from pydantic import AnyUrl, TypeAdapter

from app.exceptions import ServiceValidationError
from domain.fields import calendar_date, is_inline_payload

_URL = TypeAdapter(AnyUrl)


class FieldCategory(str, enum.Enum):
    """Sanitization categories for optional profile fields"""

    INTEGER = "integer"
    DECIMAL = "decimal"
    STRING = "string"
    DATE = "date"
    URL = "url"


PROFILE_FIELD_CATEGORIES = {
    "gender": FieldCategory.STRING,
    "date_of_birth": FieldCategory.DATE,
    "height": FieldCategory.INTEGER,
    "weight": FieldCategory.DECIMAL,
    "goal": FieldCategory.STRING,
    "photo_url": FieldCategory.URL,
    "daily_calories": FieldCategory.INTEGER,
    "daily_protein": FieldCategory.INTEGER,
    "daily_carbs": FieldCategory.INTEGER,
    "daily_sugar": FieldCategory.INTEGER,
}

# Width of the VARCHAR columns behind string fields
PROFILE_FIELD_MAX_LENGTH = {"gender": 10, "goal": 20}

REQUIRED_PROFILE_FIELDS = ("email", "name")

# Columns a conflicting upsert always replaces with the incoming value
OVERWRITE_ON_CONFLICT = ("email", "name")

# Columns a conflicting upsert replaces only when the incoming value is present
MERGE_ON_CONFLICT = (
    "gender",
    "date_of_birth",
    "height",
    "weight",
    "goal",
    "photo_url",
    "daily_calories",
    "daily_protein",
    "daily_carbs",
    "daily_sugar",
)


def _positive_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    elif isinstance(value, (int, float, Decimal)):
        number = float(value)
    else:
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


def sanitize_integer(value: Any) -> Optional[int]:
    """Positive integer or None. Halves round up (2.5 -> 3)."""
    number = _positive_number(value)
    if number is None:
        return None
    rounded = math.floor(number + 0.5)
    return rounded if rounded > 0 else None


def sanitize_decimal(value: Any) -> Optional[float]:
    """Positive number or None, decimals kept."""
    return _positive_number(value)


def sanitize_string(value: Any) -> Any:
    """None for null or blank text, otherwise the value unchanged."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def sanitize_text(value: Any, max_length: Optional[int] = None) -> Optional[str]:
    """Non-blank text that fits ``max_length``, otherwise None."""
    value = sanitize_string(value)
    if not isinstance(value, str):
        return None
    if max_length is not None and len(value) > max_length:
        return None
    return value


def sanitize_date(value: Any) -> Optional[str]:
    """``YYYY-MM-DD`` for an ISO date or date-time, otherwise None."""
    if isinstance(value, date):
        return calendar_date(value)
    value = sanitize_string(value)
    if not isinstance(value, str):
        return None
    try:
        return calendar_date(value)
    except ValueError:
        return None


def sanitize_url(value: Any) -> Optional[str]:
    """An absolute URL, otherwise None. Inline ``data:`` payloads are dropped."""
    value = sanitize_text(value)
    if value is None or is_inline_payload(value):
        return None
    try:
        _URL.validate_python(value)
    except ValueError:
        return None
    return value


def sanitize(field: str, value: Any) -> Any:
    """Normalize one optional profile field to a valid value or None.

    Raises:
        KeyError: if ``field`` is not an optional profile field
    """
    category = PROFILE_FIELD_CATEGORIES[field]
    if category is FieldCategory.INTEGER:
        return sanitize_integer(value)
    if category is FieldCategory.DECIMAL:
        return sanitize_decimal(value)
    if category is FieldCategory.DATE:
        return sanitize_date(value)
    if category is FieldCategory.URL:
        return sanitize_url(value)
    return sanitize_text(value, PROFILE_FIELD_MAX_LENGTH.get(field))


def sanitize_profile_fields(values: Mapping[str, Any], only_present: bool = False) -> dict:
    """Sanitize every optional profile field.

    With ``only_present`` the result holds only the fields found in ``values``
    (used for partial updates); otherwise every optional field is returned and
    missing ones come back as None.
    """
    return {
        field: sanitize(field, values.get(field))
        for field in PROFILE_FIELD_CATEGORIES
        if not only_present or field in values
    }


def require_profile_fields(values: Mapping[str, Any], fields=REQUIRED_PROFILE_FIELDS) -> None:
    """Required fields bypass sanitization but must carry non-blank text.

    Raises:
        ServiceValidationError: naming the missing fields
    """
    missing = [
        field
        for field in fields
        if not isinstance(values.get(field), str) or not values[field].strip()
    ]
    if missing:
        raise ServiceValidationError(
            "Missing required fields",
            details={"required": list(fields), "missing": missing},
            code="MISSING_REQUIRED_FIELDS",
        )


def sanitize_image_reference(value: Any) -> Optional[str]:
    """Meal image reference: absent when blank or an inline payload."""
    value = sanitize_string(value)
    if value is None or is_inline_payload(value):
        return None
    return value
