from pydantic import BaseModel, ConfigDict, Field


class FoodEstimate(BaseModel):
    """Best-effort nutrition estimate from the food-recognition service.

    Every field is required; a response missing any of them is a failed call.
    """

    model_config = ConfigDict(extra="ignore")

    name: str
    calories: float
    protein: float
    carbs: float
    fat: float
    sugar: float
    confidence: float


class ImageAnalysisRequest(BaseModel):
    image: str = Field(..., min_length=1)


class TextAnalysisRequest(BaseModel):
    description: str = Field(..., min_length=1)
