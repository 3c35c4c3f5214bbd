from typing import Any, Optional

from pydantic import AnyUrl, BaseModel, ConfigDict, EmailStr, Field, TypeAdapter, field_validator

_URL = TypeAdapter(AnyUrl)


class Profile(BaseModel):
    """Canonical user profile as returned to callers."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    email: EmailStr
    name: str = Field(..., min_length=1)
    gender: Optional[str] = Field(None, max_length=10)
    date_of_birth: Optional[str] = Field(None, alias="dateOfBirth")
    height: Optional[int] = None
    weight: Optional[float] = None
    goal: Optional[str] = Field(None, max_length=20)
    photo_url: Optional[str] = Field(None, alias="photoUrl")

    # Daily targets
    daily_calories: Optional[int] = Field(None, alias="dailyCalories")
    daily_protein: Optional[int] = Field(None, alias="dailyProtein")
    daily_carbs: Optional[int] = Field(None, alias="dailyCarbs")
    daily_sugar: Optional[int] = Field(None, alias="dailySugar")

    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    @field_validator("photo_url")
    @classmethod
    def validate_photo_url(cls, v):
        if v is not None:
            _URL.validate_python(v)
        return v


class ProfileSync(BaseModel):
    """Body of a profile sync (merge-upsert).

    Optional fields are deliberately untyped: clients send empty strings,
    zeros and numbers-as-text, which the sanitizer normalizes to absence.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    email: EmailStr
    name: str = Field(..., min_length=1)
    gender: Any = None
    date_of_birth: Any = Field(None, alias="dateOfBirth")
    height: Any = None
    weight: Any = None
    goal: Any = None
    photo_url: Any = Field(None, alias="photoUrl")
    daily_calories: Any = Field(None, alias="dailyCalories")
    daily_protein: Any = Field(None, alias="dailyProtein")
    daily_carbs: Any = Field(None, alias="dailyCarbs")
    daily_sugar: Any = Field(None, alias="dailySugar")

    @field_validator("id", "name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class ProfileUpdate(BaseModel):
    """Body of a targeted partial update; only fields that were sent are applied."""

    model_config = ConfigDict(populate_by_name=True)

    email: Optional[EmailStr] = None
    name: Optional[str] = Field(None, min_length=1)
    gender: Any = None
    date_of_birth: Any = Field(None, alias="dateOfBirth")
    height: Any = None
    weight: Any = None
    goal: Any = None
    photo_url: Any = Field(None, alias="photoUrl")
    daily_calories: Any = Field(None, alias="dailyCalories")
    daily_protein: Any = Field(None, alias="dailyProtein")
    daily_carbs: Any = Field(None, alias="dailyCarbs")
    daily_sugar: Any = Field(None, alias="dailySugar")


class WeightHistoryEntry(BaseModel):
    """One weight measurement."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str = Field(..., alias="userId")
    weight: float
    date: str
    created_at: Optional[str] = Field(None, alias="createdAt")
