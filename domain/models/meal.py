"""
Meal log database models.
"""

from sqlalchemy import Column, Text, String, TIMESTAMP, ForeignKey, Numeric, Date, Time, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class MealEntryRecord(Base):
    """A logged meal"""

    __tablename__ = "meal_entries"

    id = Column(Text, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(
        Text,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    name = Column(Text, nullable=False)
    meal_type = Column(String(20))  # breakfast, lunch, dinner, snack, other
    meal_time = Column(Time)
    meal_date = Column(Date, nullable=False)
    calories = Column(Numeric(8, 2), nullable=False, default=0)
    protein_g = Column(Numeric(6, 2))
    carbs_g = Column(Numeric(6, 2))
    fat_g = Column(Numeric(6, 2))
    sugar_g = Column(Numeric(6, 2))
    image_url = Column(Text)
    notes = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    user = relationship("UserRecord", back_populates="meals")

    __table_args__ = (Index("idx_meal_entries_user_date", "user_id", "meal_date"),)
