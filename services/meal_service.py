from datetime import date
from typing import Any, List, Mapping, Optional, Union
import logging

from sqlalchemy.engine import Engine

from app.exceptions import ServiceValidationError
from domain import fields
from domain.mappers import MealMapper
from domain.schemas import MealCreate, MealEntry, MealUpdate, validate_payload
from repositories import MealRepository
from services.profile_service import ProfileService
from services.sanitizer import sanitize_image_reference

logger = logging.getLogger("nutrilog.meal")

# Columns that cannot be cleared by an update
NON_NULLABLE_MEAL_FIELDS = ("name", "meal_date")


class MealService:
    """Business logic for logged meals"""

    @staticmethod
    def get_all_meals(engine: Engine) -> List[MealEntry]:
        repo = MealRepository(engine)
        return [MealMapper.from_row(row) for row in repo.find_all()]

    @staticmethod
    def get_meals_by_user(engine: Engine, user_id: str) -> List[MealEntry]:
        """Meals of one user, most recent date and time first"""
        repo = MealRepository(engine)
        meals = [MealMapper.from_row(row) for row in repo.find_by_user_id(user_id)]
        logger.info(f"meals_fetched user_id={user_id} count={len(meals)}")
        return meals

    @staticmethod
    def get_meals_by_user_and_date(engine: Engine, user_id: str, on: Any) -> List[MealEntry]:
        """Meals of one user on one calendar date, in time-of-day order

        Raises:
            ServiceValidationError: if ``on`` is not an ISO calendar date
        """
        try:
            day = date.fromisoformat(fields.calendar_date(on))
        except (TypeError, ValueError) as exc:
            raise ServiceValidationError(
                "Invalid date, expected YYYY-MM-DD",
                details={"date": str(on)},
                code="INVALID_DATE",
            ) from exc

        repo = MealRepository(engine)
        rows = repo.find_by_user_id_and_date(user_id, day)
        return [MealMapper.from_row(row) for row in rows]

    @staticmethod
    def get_meal(engine: Engine, meal_id: str) -> Optional[MealEntry]:
        row = MealRepository(engine).find_by_id(meal_id)
        return MealMapper.from_row(row) if row is not None else None

    @staticmethod
    def create_meal(
        engine: Engine, user_id: str, payload: Union[MealCreate, Mapping[str, Any]]
    ) -> MealEntry:
        """
        Log a meal for ``user_id``.

        The owner is created as a placeholder profile if it does not exist yet.
        Missing macros are stored as 0 and an inline image payload is dropped.

        Raises:
            ServiceValidationError: if the meal payload is invalid
            StorageError: if a statement fails
        """
        if not isinstance(user_id, str) or not user_id.strip():
            raise ServiceValidationError("Missing required fields", details={"missing": ["userId"]})

        meal = validate_payload(MealCreate, payload)
        ProfileService.ensure_profile_exists(engine, user_id)

        values = meal.model_dump()
        values["user_id"] = user_id
        values["image_url"] = sanitize_image_reference(values.get("image_url"))

        row = MealRepository(engine).create(MealMapper.to_write_args(values))
        entry = MealMapper.from_row(row)
        logger.info(
            f"meal_created meal_id={entry.id} user_id={user_id} "
            f"date={entry.meal_date} calories={entry.calories}"
        )
        return entry

    @staticmethod
    def update_meal(
        engine: Engine, meal_id: str, payload: Union[MealUpdate, Mapping[str, Any]]
    ) -> Optional[MealEntry]:
        """
        Replace every supplied field of a meal.

        Returns:
            The updated meal, or None if no meal has that id

        Raises:
            ServiceValidationError: if name or date is explicitly cleared
            EmptyUpdateError: if the payload supplies no field
        """
        changes = validate_payload(MealUpdate, payload).model_dump(exclude_unset=True)

        cleared = [f for f in NON_NULLABLE_MEAL_FIELDS if f in changes and changes[f] is None]
        if cleared:
            raise ServiceValidationError(
                "Required meal fields cannot be cleared", details={"fields": cleared}
            )
        if "image_url" in changes:
            changes["image_url"] = sanitize_image_reference(changes["image_url"])

        row = MealRepository(engine).update_by_id(meal_id, MealMapper.to_update_pairs(changes))
        if row is None:
            logger.warning(f"meal_update_missing meal_id={meal_id}")
            return None

        logger.info(f"meal_updated meal_id={meal_id} fields={sorted(changes)}")
        return MealMapper.from_row(row)

    @staticmethod
    def delete_meal(engine: Engine, meal_id: str) -> bool:
        deleted = MealRepository(engine).delete_by_id(meal_id)
        logger.info(f"meal_deleted meal_id={meal_id} deleted={deleted}")
        return deleted
