"""Food recognition routes"""

from fastapi import APIRouter, Depends
import logging

from adapters.inference_adapter import GeminiFoodAnalyzer
from api.dependencies import get_food_analyzer
from domain.schemas import FoodEstimate, ImageAnalysisRequest, TextAnalysisRequest

router = APIRouter(prefix="/analyze", tags=["Analyze"])
logger = logging.getLogger("nutrilog.api.analyze")


@router.post("/image", response_model=FoodEstimate)
def analyze_image(
    request: ImageAnalysisRequest, analyzer: GeminiFoodAnalyzer = Depends(get_food_analyzer)
):
    """Estimate nutrition from a base64 photo or ``data:`` URI."""
    return analyzer.analyze_image(request.image)


@router.post("/text", response_model=FoodEstimate)
def analyze_text(
    request: TextAnalysisRequest, analyzer: GeminiFoodAnalyzer = Depends(get_food_analyzer)
):
    """Estimate nutrition from a free-text description."""
    return analyzer.analyze_text(request.description)
