from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.enums import MealType
from domain import fields


class MealEntry(BaseModel):
    """Canonical logged meal."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str = Field(..., alias="userId")
    name: str = Field(..., min_length=1)
    meal_type: MealType = Field(MealType.OTHER, alias="mealType")
    meal_time: str = Field("", alias="mealTime")
    meal_date: str = Field(..., alias="mealDate")
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    sugar: float = 0
    image_url: Optional[str] = Field(None, alias="imageUrl")
    notes: Optional[str] = None
    created_at: Optional[str] = Field(None, alias="createdAt")


class _MealFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    @field_validator("meal_type", mode="before", check_fields=False)
    @classmethod
    def parse_meal_type(cls, v):
        return MealType.parse(v)

    @field_validator("meal_date", check_fields=False)
    @classmethod
    def normalize_date(cls, v):
        return fields.calendar_date(v) if v is not None else v

    @field_validator("meal_time", check_fields=False)
    @classmethod
    def normalize_time(cls, v):
        return fields.time_of_day(v) if v is not None else v


class MealCreate(_MealFields):
    """A meal as sent by the client when logging it."""

    name: str = Field(..., min_length=1)
    meal_type: MealType = Field(MealType.OTHER, alias="type")
    meal_time: str = Field(..., alias="time")
    meal_date: str = Field(..., alias="date")
    calories: Optional[float] = None
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fat: Optional[float] = None
    sugar: Optional[float] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")
    notes: Optional[str] = None


class MealUpdate(_MealFields):
    """Replacement values for a logged meal; unset fields are left alone."""

    name: Optional[str] = Field(None, min_length=1)
    meal_type: Optional[MealType] = Field(None, alias="type")
    meal_time: Optional[str] = Field(None, alias="time")
    meal_date: Optional[str] = Field(None, alias="date")
    calories: Optional[float] = None
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fat: Optional[float] = None
    sugar: Optional[float] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")
    notes: Optional[str] = None


class MealCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., min_length=1, alias="userId")
    meal: MealCreate


class MealUpdateRequest(BaseModel):
    meal: MealUpdate


class DailyTotals(BaseModel):
    """Summed nutrition for one owner and calendar day."""

    model_config = ConfigDict(populate_by_name=True)

    calories: float = Field(0, alias="totalCalories")
    protein: float = Field(0, alias="totalProtein")
    carbs: float = Field(0, alias="totalCarbs")
    fat: float = Field(0, alias="totalFat")
    sugar: float = Field(0, alias="totalSugar")
