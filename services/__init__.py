"""Services package - Business logic layer"""

from services.profile_service import ProfileService
from services.weight_history_service import WeightHistoryService
from services.meal_service import MealService
from services.nutrition_service import NutritionService

__all__ = [
    "ProfileService",
    "WeightHistoryService",
    "MealService",
    "NutritionService",
]
