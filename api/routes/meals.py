"""Meal logging routes"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.engine import Engine
import logging

from api.dependencies import get_engine
from app.exceptions import NotFoundError
from domain.schemas import (
    DailyTotals,
    MealCreateRequest,
    MealEntry,
    MealUpdateRequest,
    validate_payload,
)
from services import MealService, NutritionService

router = APIRouter(prefix="/meals", tags=["Meals"])
logger = logging.getLogger("nutrilog.api.meals")


@router.get("", response_model=List[MealEntry])
def get_meals(
    user_id: Optional[str] = Query(None, alias="userId"),
    engine: Engine = Depends(get_engine),
):
    """Meals of one user, newest first; every meal when no user is given."""
    if user_id:
        return MealService.get_meals_by_user(engine, user_id)
    return MealService.get_all_meals(engine)


@router.get("/stats/daily", response_model=DailyTotals)
def get_daily_stats(
    user_id: str = Query(..., alias="userId", min_length=1),
    on: str = Query(..., alias="date", min_length=1),
    engine: Engine = Depends(get_engine),
):
    """Energy and macro totals for one user and date (YYYY-MM-DD)."""
    return NutritionService.daily_totals(engine, user_id, on)


@router.get("/recent", response_model=List[MealEntry])
def get_recent_meals(
    user_id: str = Query(..., alias="userId", min_length=1),
    days: int = Query(7, ge=0),
    engine: Engine = Depends(get_engine),
):
    return NutritionService.entries_within_last_n_days(engine, user_id, days)


@router.get("/{meal_id}", response_model=MealEntry)
def get_meal(meal_id: str, engine: Engine = Depends(get_engine)):
    meal = MealService.get_meal(engine, meal_id)
    if meal is None:
        raise NotFoundError(f"Meal {meal_id} not found")
    return meal


@router.post("", response_model=MealEntry, status_code=status.HTTP_201_CREATED)
def create_meal(payload: Dict[str, Any] = Body(...), engine: Engine = Depends(get_engine)):
    """
    Log a meal.

    Body: ``{"userId": ..., "meal": {"name", "type", "time", "date", "calories", ...}}``.
    An unknown user gets a placeholder profile.
    """
    request = validate_payload(MealCreateRequest, payload)
    return MealService.create_meal(engine, request.user_id, request.meal)


@router.put("/{meal_id}")
def update_meal(
    meal_id: str, payload: Dict[str, Any] = Body(...), engine: Engine = Depends(get_engine)
):
    """Replace the supplied fields of a meal. Body: ``{"meal": {...}}``."""
    request = validate_payload(MealUpdateRequest, payload)
    meal = MealService.update_meal(engine, meal_id, request.meal)
    if meal is None:
        raise NotFoundError(f"Meal {meal_id} not found")
    return {"success": True}


@router.delete("/{meal_id}")
def delete_meal(meal_id: str, engine: Engine = Depends(get_engine)):
    if not MealService.delete_meal(engine, meal_id):
        raise NotFoundError(f"Meal {meal_id} not found")
    return {"success": True}
