"""Daily activity model."""
from datetime import datetime

from sqlalchemy import Column, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from app.database import Base

ACTIVITY_TYPES = ("Eat", "Nap", "Play", "Diaper", "Learning", "Outdoor", "Other")


class DailyActivity(Base):
    """Something a child did during the day: a meal, a nap, play time."""
    
    __tablename__ = "daily_activities"
    __table_args__ = (
        Index("ix_daily_activities_child_time", "child_id", "activity_time"),
    )
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    child_id = Column(Integer, ForeignKey("children.id", ondelete="CASCADE"), nullable=False)
    activity_type = Column(String(30), nullable=False)
    activity_time = Column(String(26), nullable=False)  # ISO datetime
    duration_minutes = Column(Integer)
    food_item = Column(String(200))
    notes = Column(Text)
    recorded_by = Column(String(36))  # users.id
    created_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String(26), onupdate=lambda: datetime.utcnow().isoformat())
    
    # Relationships
    child = relationship("Child", back_populates="activities")
