"""Holiday model."""
from datetime import datetime

from sqlalchemy import Column, Integer, String

from app.database import Base


class Holiday(Base):
    """Day the daycare is closed."""
    
    __tablename__ = "holidays"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(String(500))
    date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    is_recurring = Column(Integer, default=0)  # SQLite boolean
    recurrence_type = Column(String(20))  # yearly, monthly
    color = Column(String(7), default="#FF6B6B")
    created_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String(26), onupdate=lambda: datetime.utcnow().isoformat())
