"""
App package - Application configuration and core utilities.
Contains settings, exceptions, and foundational application code.
"""

from app.config import settings
from app.exceptions import (
    AppError,
    ServiceValidationError,
    NotFoundError,
    ValidationError,
    StorageError,
    EmptyUpdateError,
    InferenceError,
)

__all__ = [
    "settings",
    "AppError",
    "ServiceValidationError",
    "NotFoundError",
    "ValidationError",
    "StorageError",
    "EmptyUpdateError",
    "InferenceError",
]
