"""
Tests for row mapping (storage row -> canonical record) and write arguments.

No database is needed: rows are built the way the driver returns them.
"""

from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal

import pytest

from app.exceptions import ValidationError
from domain import fields
from domain.enums import MealType
from domain.fields import UNSET
from domain.mappers import MealMapper, ProfileMapper, WeightHistoryMapper
from test_fixtures import make_meal_row, make_user_row


# =============================================================================
# DATE / TIMESTAMP NORMALIZATION
# =============================================================================


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("2026-01-21T05:00:00.000Z", "2026-01-21"),
        ("2026-01-21", "2026-01-21"),
        ("2026-01-21 23:59:59+02", "2026-01-21"),
        (date(2026, 1, 21), "2026-01-21"),
        (datetime(2026, 1, 21, 23, 0, tzinfo=timezone(timedelta(hours=-5))), "2026-01-21"),
    ],
)
def test_calendar_date_keeps_date_prefix(raw, expected):
    assert fields.calendar_date(raw) == expected


@pytest.mark.parametrize("raw", ["21/01/2026", "yesterday", "2026-13-01"])
def test_calendar_date_rejects_garbage(raw):
    with pytest.raises(ValueError):
        fields.calendar_date(raw)


def test_timestamp_normalization():
    """
    Verifies:
    - Aware datetimes are converted to UTC with millisecond precision
    - Naive datetimes are taken as UTC
    - NULL stays absent
    """
    aware = datetime(2026, 1, 21, 7, 0, tzinfo=timezone(timedelta(hours=2)))
    assert fields.timestamp(aware) == "2026-01-21T05:00:00.000Z"
    assert fields.timestamp(datetime(2026, 1, 21, 5, 0)) == "2026-01-21T05:00:00.000Z"
    assert fields.timestamp(None) is None


def test_numeric_coercion():
    assert fields.parse_number("64.50") == 64.5
    assert fields.parse_number(Decimal("1.25")) == 1.25
    assert fields.number_or_zero(None) == 0.0
    assert fields.optional_number(None) is None
    with pytest.raises(TypeError):
        fields.parse_number(True)
    with pytest.raises(ValueError):
        fields.parse_number("NaN")


# =============================================================================
# PROFILE MAPPING
# =============================================================================


def test_profile_from_row_normalizes_encodings():
    """
    Verifies:
    - Numeric text becomes numbers
    - Native dates become YYYY-MM-DD
    - Timestamps become ISO instants
    - Canonical record serializes with camelCase names
    """
    profile = ProfileMapper.from_row(make_user_row(user_id="user-1"))

    assert profile.id == "user-1"
    assert profile.weight == 64.5
    assert profile.height == 168
    assert profile.date_of_birth == "1992-04-17"
    assert profile.created_at == "2026-01-02T09:30:00.000Z"

    data = profile.model_dump(by_alias=True)
    assert data["dateOfBirth"] == "1992-04-17"
    assert data["dailyCalories"] == 2100
    assert data["photoUrl"] == "https://cdn.example.com/avatars/sarah.png"


def test_profile_from_row_optional_fields_absent():
    row = make_user_row(
        gender=None, date_of_birth=None, height=None, weight=None, goal="", photo_url=None,
        daily_calories=None, daily_protein=None, daily_carbs=None, daily_sugar=None,
    )
    profile = ProfileMapper.from_row(row)

    assert profile.weight is None
    assert profile.height is None
    assert profile.goal is None
    assert profile.date_of_birth is None


def test_profile_from_row_drops_inline_avatar():
    profile = ProfileMapper.from_row(make_user_row(photo_url="data:image/png;base64,AAAA"))
    assert profile.photo_url is None


@pytest.mark.parametrize(
    "overrides,column",
    [
        ({"height": "tall"}, "height"),
        ({"weight": "seventy"}, "weight"),
        ({"daily_calories": "2000.5"}, "daily_calories"),
        ({"date_of_birth": "not-a-date"}, "date_of_birth"),
    ],
)
def test_profile_from_row_rejects_uncoercible_column(overrides, column):
    """
    Verifies:
    - A column that cannot be coerced raises ValidationError
    - The error names the entity and keeps the raw row
    """
    row = make_user_row(**overrides)
    with pytest.raises(ValidationError) as exc_info:
        ProfileMapper.from_row(row)

    err = exc_info.value
    assert err.entity == "profile"
    assert err.row == row
    assert err.details["column"] == column


def test_profile_from_row_missing_required_field():
    row = make_user_row()
    del row["email"]
    with pytest.raises(ValidationError):
        ProfileMapper.from_row(row)


def test_profile_from_row_invalid_email():
    with pytest.raises(ValidationError) as exc_info:
        ProfileMapper.from_row(make_user_row(email="not-an-email"))
    assert "errors" in exc_info.value.details


def test_profile_from_none_row():
    with pytest.raises(ValidationError):
        ProfileMapper.from_row(None)


def test_profile_update_pairs_mark_unsupplied_columns():
    pairs = dict(ProfileMapper.to_update_pairs({"weight": 72.5, "goal": None}))

    assert pairs["weight"] == 72.5
    assert pairs["goal"] is None
    assert pairs["height"] is UNSET
    assert pairs["email"] is UNSET


def test_profile_write_args_convert_birth_date():
    args = ProfileMapper.to_write_args("user-1", {"email": "a@example.com", "name": "A", "date_of_birth": "1990-05-01"})
    assert args["id"] == "user-1"
    assert args["date_of_birth"] == date(1990, 5, 1)
    assert args["weight"] is None


# =============================================================================
# MEAL MAPPING
# =============================================================================


def test_meal_from_row_renames_irregular_columns():
    """
    Verifies:
    - protein_g/carbs_g/fat_g/sugar_g map to protein/carbs/fat/sugar
    - NULL macros become 0
    - Time and date are normalized
    """
    meal = MealMapper.from_row(make_meal_row(meal_id="meal-1"))

    assert meal.id == "meal-1"
    assert meal.protein == 35.5
    assert meal.carbs == 0
    assert meal.fat == 18.0
    assert meal.sugar == 0
    assert meal.calories == 420.0
    assert meal.meal_type == MealType.LUNCH
    assert meal.meal_time == "12:30:00"
    assert meal.meal_date == "2026-01-21"

    data = meal.model_dump(by_alias=True, mode="json")
    assert data["mealType"] == "lunch"
    assert data["mealDate"] == "2026-01-21"
    assert data["userId"] == "user-1"


def test_meal_from_row_date_with_time_component():
    meal = MealMapper.from_row(make_meal_row(meal_date="2026-01-21T05:00:00.000Z"))
    assert meal.meal_date == "2026-01-21"


def test_meal_from_row_defaults():
    meal = MealMapper.from_row(make_meal_row(meal_type=None, calories=None, meal_time=None))
    assert meal.meal_type == MealType.OTHER
    assert meal.calories == 0
    assert meal.meal_time == ""


@pytest.mark.parametrize(
    "overrides",
    [{"calories": "lots"}, {"meal_type": "brunch"}, {"meal_date": None}, {"name": None}],
)
def test_meal_from_row_rejects_invalid_rows(overrides):
    with pytest.raises(ValidationError) as exc_info:
        MealMapper.from_row(make_meal_row(**overrides))
    assert exc_info.value.entity == "meal_entry"


def test_meal_round_trip_is_idempotent():
    """
    Verifies:
    - Mapping, deriving write arguments and mapping again yields the same record
    """
    first = MealMapper.from_row(make_meal_row(meal_id="meal-7", meal_type="SNACK"))

    args = MealMapper.to_write_args(first.model_dump())
    second = MealMapper.from_row({**args, "id": first.id, "created_at": datetime(2026, 1, 21, 12, 31)})

    assert second == first
    assert args["protein_g"] == 35.5
    assert args["meal_type"] == "snack"
    assert args["meal_time"] == time(12, 30)


def test_meal_inline_image_stays_absent():
    first = MealMapper.from_row(make_meal_row(image_url="data:image/jpeg;base64,/9j/4AAQ"))
    assert first.image_url is None

    args = MealMapper.to_write_args(first.model_dump())
    assert args["image_url"] is None
    assert MealMapper.from_row({**args, "id": first.id, "created_at": None}).image_url is None


def test_meal_update_pairs_never_touch_owner():
    pairs = MealMapper.to_update_pairs({"user_id": "someone-else", "calories": None})
    columns = [column for column, _ in pairs]

    assert "user_id" not in columns
    assert dict(pairs)["calories"] == 0
    assert dict(pairs)["name"] is UNSET


# =============================================================================
# WEIGHT HISTORY MAPPING
# =============================================================================


def test_weight_history_from_row():
    entry = WeightHistoryMapper.from_row(
        {"id": "w-1", "user_id": "user-1", "weight": Decimal("70.40"), "date": date(2026, 1, 21)}
    )
    assert entry.weight == 70.4
    assert entry.date == "2026-01-21"
    assert entry.model_dump(by_alias=True)["userId"] == "user-1"


def test_weight_history_requires_weight():
    with pytest.raises(ValidationError):
        WeightHistoryMapper.from_row({"id": "w-1", "user_id": "user-1", "weight": None, "date": "2026-01-21"})


def test_date_argument_refuses_unparseable_text():
    assert fields.date_argument("2026-01-21T08:00:00Z") == date(2026, 1, 21)
    assert fields.date_argument("  ") is None
    with pytest.raises(ValueError):
        fields.date_argument("05/01/1990")
