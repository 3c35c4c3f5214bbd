"""
API dependencies for dependency injection
"""

from fastapi import Request
from sqlalchemy.engine import Engine

from adapters.inference_adapter import GeminiFoodAnalyzer
from app.exceptions import InferenceError, StorageError


def get_engine(request: Request) -> Engine:
    """
    Storage engine created at startup.

    Usage:
        @router.get("/example")
        def example(engine: Engine = Depends(get_engine)):
            ...
    """
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise StorageError("Database is not initialized")
    return engine


def get_food_analyzer(request: Request) -> GeminiFoodAnalyzer:
    """Inference client created at startup."""
    analyzer = getattr(request.app.state, "food_analyzer", None)
    if analyzer is None:
        raise InferenceError("Inference service is not configured", code="INFERENCE_UNAVAILABLE")
    return analyzer
