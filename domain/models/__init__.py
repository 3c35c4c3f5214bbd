"""
Domain models package - SQLAlchemy table definitions.
"""

from domain.models.database import Base, init_database
from domain.models.profile import UserRecord, WeightHistoryRecord
from domain.models.meal import MealEntryRecord

__all__ = [
    # Database
    "Base",
    "init_database",
    # Tables
    "UserRecord",
    "WeightHistoryRecord",
    "MealEntryRecord",
]
