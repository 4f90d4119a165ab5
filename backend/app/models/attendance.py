"""Attendance model."""
from datetime import datetime

from sqlalchemy import Column, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from app.database import Base


class Attendance(Base):
    """One check-in / check-out record for a child on a day."""
    
    __tablename__ = "attendances"
    __table_args__ = (
        Index("ix_attendances_child_date", "child_id", "date"),
    )
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    child_id = Column(Integer, ForeignKey("children.id", ondelete="CASCADE"), nullable=False)
    date = Column(String(10), nullable=False)  # YYYY-MM-DD
    check_in_time = Column(String(26), nullable=False)
    check_out_time = Column(String(26))
    check_in_notes = Column(Text)
    check_out_notes = Column(Text)
    created_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String(26), onupdate=lambda: datetime.utcnow().isoformat())
    
    # Relationships
    child = relationship("Child", back_populates="attendances")
