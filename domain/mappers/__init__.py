"""
Domain mappers package.
Handles transformation between raw storage rows and canonical records.
"""

from domain.mappers.profile_mapper import ProfileMapper, WeightHistoryMapper
from domain.mappers.meal_mapper import MealMapper

__all__ = ["ProfileMapper", "WeightHistoryMapper", "MealMapper"]
