"""
Domain schemas package - canonical records and request bodies (Pydantic).
"""

from domain.schemas.profile_schemas import (
    Profile,
    ProfileSync,
    ProfileUpdate,
    WeightHistoryEntry,
)
from domain.schemas.meal_schemas import (
    MealEntry,
    MealCreate,
    MealUpdate,
    MealCreateRequest,
    MealUpdateRequest,
    DailyTotals,
)
from domain.schemas.validation import validate_payload
from domain.schemas.analysis_schemas import (
    FoodEstimate,
    ImageAnalysisRequest,
    TextAnalysisRequest,
)

__all__ = [
    # Profile schemas
    "Profile",
    "ProfileSync",
    "ProfileUpdate",
    "WeightHistoryEntry",
    # Meal schemas
    "MealEntry",
    "MealCreate",
    "MealUpdate",
    "MealCreateRequest",
    "MealUpdateRequest",
    "DailyTotals",
    # Analysis schemas
    "FoodEstimate",
    "ImageAnalysisRequest",
    "TextAnalysisRequest",
    # Helpers
    "validate_payload",
]
