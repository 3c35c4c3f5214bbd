"""
Nutrition aggregation over logged meals.

Totals are computed from mapped MealEntry records, so missing macros already
count as zero by the time they are summed.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable, List, Optional
import logging

from sqlalchemy.engine import Engine

from domain.schemas import DailyTotals, MealEntry
from services.meal_service import MealService

logger = logging.getLogger("nutrilog.nutrition")

DEFAULT_RECENT_DAYS = 7


def summarize(entries: Iterable[MealEntry]) -> DailyTotals:
    """Sum energy and macros; no entries gives all zeros."""
    totals = DailyTotals()
    for entry in entries:
        totals.calories += entry.calories
        totals.protein += entry.protein
        totals.carbs += entry.carbs
        totals.fat += entry.fat
        totals.sugar += entry.sugar
    return totals


def _entry_day(entry: MealEntry) -> Optional[datetime]:
    """Midnight UTC of the entry's calendar date, or None if unparseable."""
    try:
        day = date.fromisoformat(str(entry.meal_date)[:10])
    except ValueError:
        return None
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)


def filter_recent(
    entries: Iterable[MealEntry], days: int = DEFAULT_RECENT_DAYS, now: Optional[datetime] = None
) -> List[MealEntry]:
    """Keep entries dated no earlier than ``now - days``."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    cutoff = now - timedelta(days=days)

    recent = []
    for entry in entries:
        day = _entry_day(entry)
        if day is not None and day >= cutoff:
            recent.append(entry)
    return recent


class NutritionService:
    """Per-day totals and recent-entry queries"""

    @staticmethod
    def daily_totals(engine: Engine, user_id: str, on: Any) -> DailyTotals:
        """Energy and macro totals for one user and calendar date"""
        entries = MealService.get_meals_by_user_and_date(engine, user_id, on)
        totals = summarize(entries)
        logger.info(
            f"daily_totals user_id={user_id} date={on} meals={len(entries)} "
            f"calories={totals.calories}"
        )
        return totals

    @staticmethod
    def entries_within_last_n_days(
        engine: Engine,
        user_id: str,
        days: int = DEFAULT_RECENT_DAYS,
        now: Optional[datetime] = None,
    ) -> List[MealEntry]:
        """Meals of a user dated within the last ``days`` days, newest first"""
        return filter_recent(MealService.get_meals_by_user(engine, user_id), days, now)
