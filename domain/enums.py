"""
Domain enums for nutrilog.
Contains the closed categorical tags used across the domain models.
"""

import enum
from typing import Optional


class MealType(str, enum.Enum):
    """Meal category tags"""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Optional[str]) -> "MealType":
        """Case-insensitive lookup; absent or blank values become OTHER.

        Raises:
            ValueError: if the value names no known category
        """
        if value is None:
            return cls.OTHER
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        if not text:
            return cls.OTHER
        return cls(text)
