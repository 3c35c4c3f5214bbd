"""
Error taxonomy and edge case tests.

This test suite covers:
- The shared shape of application errors
- Storage failures surfaced with the driver message
- Serialization of error details
- Maintenance cleanup of legacy empty strings
"""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import text

from api.middleware import make_serializable
from app.exceptions import (
    AppError,
    EmptyUpdateError,
    InferenceError,
    NotFoundError,
    ServiceValidationError,
    StorageError,
    ValidationError,
)
from domain.schemas import ProfileSync, validate_payload
from repositories import UserRepository
from scripts.cleanup_empty_strings import cleanup_empty_strings, find_affected_ids
from services import ProfileService
from test_fixtures import engine, make_profile_payload


# =============================================================================
# ERROR SHAPE
# =============================================================================


@pytest.mark.parametrize(
    "error,status",
    [
        (ServiceValidationError(), 400),
        (EmptyUpdateError(), 400),
        (NotFoundError(), 404),
        (StorageError(), 500),
        (ValidationError("meal_entry", {"id": "m-1"}), 500),
        (InferenceError(), 502),
    ],
)
def test_error_statuses(error, status):
    assert isinstance(error, AppError)
    assert error.http_status == status
    assert str(error) == error.message


def test_error_to_dict():
    err = ServiceValidationError("Missing required fields", details={"missing": ["name"]}, code="MISSING")
    assert err.to_dict() == {
        "message": "Missing required fields",
        "code": "MISSING",
        "details": {"missing": ["name"]},
    }
    assert EmptyUpdateError().to_dict() == {"message": "No fields to update"}


def test_validation_error_keeps_copy_of_row():
    row = {"id": "m-1", "calories": "lots"}
    err = ValidationError("meal_entry", row)
    row["calories"] = 0

    assert err.entity == "meal_entry"
    assert err.row == {"id": "m-1", "calories": "lots"}
    assert err.code == "INVALID_ROW"


def test_validate_payload_wraps_pydantic_errors():
    with pytest.raises(ServiceValidationError) as exc_info:
        validate_payload(ProfileSync, {"id": "user-1"})
    fields = {tuple(e["loc"]) for e in exc_info.value.details["errors"]}
    assert ("email",) in fields
    assert ("name",) in fields


def test_make_serializable_handles_driver_types():
    assert make_serializable({"w": Decimal("70.50"), "d": date(2026, 1, 21), "x": [ValueError("bad")]}) == {
        "w": 70.5,
        "d": "2026-01-21",
        "x": ["bad"],
    }


# =============================================================================
# STORAGE FAILURES
# =============================================================================


def test_missing_table_is_storage_error(engine):
    with engine.begin() as conn:
        conn.execute(text("DROP TABLE weight_history"))

    with pytest.raises(StorageError) as exc_info:
        ProfileService.get_weight_history(engine, "user-1")
    assert "weight_history" in exc_info.value.message


def test_storage_errors_are_not_retried(engine, monkeypatch):
    calls = []

    def failing(self):
        calls.append(1)
        raise StorageError("connection reset")

    monkeypatch.setattr(UserRepository, "find_all", failing)
    with pytest.raises(StorageError):
        ProfileService.get_all_profiles(engine)
    assert calls == [1]


# =============================================================================
# LEGACY EMPTY STRINGS
# =============================================================================


def test_cleanup_empty_strings(engine):
    """
    Verifies:
    - Rows holding '' are reported and nulled
    - Afterwards a merge-upsert can fill the cleaned columns
    """
    payload = make_profile_payload(user_id="legacy-1")
    ProfileService.upsert_profile(engine, payload)
    ProfileService.upsert_profile(engine, make_profile_payload(user_id="clean-1", goal="gain"))
    with engine.begin() as conn:
        conn.execute(text("UPDATE users SET goal = '', gender = '', height = '' WHERE id = 'legacy-1'"))

    assert find_affected_ids(engine) == ["legacy-1"]
    assert cleanup_empty_strings(engine) == ["legacy-1"]
    assert find_affected_ids(engine) == []

    profile = ProfileService.upsert_profile(engine, {**payload, "goal": "lose", "height": 170})
    assert profile.goal == "lose"
    assert profile.height == 170
    assert ProfileService.get_profile(engine, "clean-1").goal == "gain"
