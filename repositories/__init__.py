"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository, build_set_clause
from repositories.user_repository import UserRepository, WeightHistoryRepository
from repositories.meal_repository import MealRepository

__all__ = [
    "BaseRepository",
    "build_set_clause",
    "UserRepository",
    "WeightHistoryRepository",
    "MealRepository",
]
