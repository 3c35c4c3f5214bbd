"""
Meal Repository - Data access layer for logged meals
"""

from typing import Any, List

from sqlalchemy import select
from sqlalchemy.engine import Engine

from repositories.base import BaseRepository
from domain.models import MealEntryRecord


class MealRepository(BaseRepository):
    """Repository for the ``meal_entries`` table"""

    def __init__(self, engine: Engine):
        super().__init__(engine, MealEntryRecord.__table__)

    def find_by_user_id(self, user_id: str) -> List[dict]:
        """All meals of a user, latest date first, then latest time of day"""
        statement = (
            select(self.table)
            .where(self.table.c.user_id == user_id)
            .order_by(
                self.table.c.meal_date.desc(),
                self.table.c.meal_time.desc(),
                self.table.c.id,
            )
        )
        return self._fetch_all(statement)

    def find_by_user_id_and_date(self, user_id: str, meal_date: Any) -> List[dict]:
        """Meals of a user on one calendar date, earliest time of day first"""
        statement = (
            select(self.table)
            .where(
                self.table.c.user_id == user_id,
                self.table.c.meal_date == meal_date,
            )
            .order_by(self.table.c.meal_time.asc(), self.table.c.id)
        )
        return self._fetch_all(statement)
