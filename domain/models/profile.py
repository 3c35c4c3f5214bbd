"""
Profile-related database models.
"""

from sqlalchemy import (
    Column,
    Text,
    String,
    TIMESTAMP,
    ForeignKey,
    Integer,
    Numeric,
    Date,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from datetime import datetime, timezone
import uuid

from domain.models.database import Base


class UserRecord(Base):
    """User profile. The id is supplied by the client (auth provider uid)."""

    __tablename__ = "users"

    id = Column(Text, primary_key=True)
    email = Column(Text, nullable=False)
    name = Column(Text, nullable=False)
    gender = Column(String(10))
    date_of_birth = Column(Date)
    height = Column(Integer)
    weight = Column(Numeric(5, 2))
    goal = Column(String(20))
    photo_url = Column(Text)
    daily_calories = Column(Integer)
    daily_protein = Column(Integer)
    daily_carbs = Column(Integer)
    daily_sugar = Column(Integer)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    # Cascades are enforced by the foreign keys, not by the ORM
    meals = relationship("MealEntryRecord", back_populates="user", passive_deletes=True)
    weight_history = relationship(
        "WeightHistoryRecord", back_populates="user", passive_deletes=True
    )


class WeightHistoryRecord(Base):
    """Append-only weight measurements"""

    __tablename__ = "weight_history"

    id = Column(Text, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(
        Text,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    weight = Column(Numeric(5, 2), nullable=False)
    date = Column(Date, nullable=False, server_default=func.current_date())
    # Orders points recorded on the same day
    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )

    user = relationship("UserRecord", back_populates="weight_history")
