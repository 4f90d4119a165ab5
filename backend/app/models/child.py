"""Child model."""
from datetime import datetime

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.database import Base


class Child(Base):
    """Enrolled child. Owned by exactly one parent."""
    
    __tablename__ = "children"
    __table_args__ = {"sqlite_autoincrement": True}
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    date_of_birth = Column(String(10), nullable=False)  # YYYY-MM-DD
    gender = Column(String(20))
    allergies = Column(Text)
    medical_notes = Column(Text)
    parent_id = Column(Integer, ForeignKey("parents.id", ondelete="CASCADE"), nullable=False, index=True)
    is_active = Column(Integer, default=1)  # SQLite boolean
    created_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String(26), onupdate=lambda: datetime.utcnow().isoformat())
    
    # Relationships
    parent = relationship("Parent", back_populates="children")
    fees = relationship("Fee", back_populates="child", cascade="all, delete-orphan")
    attendances = relationship("Attendance", back_populates="child", cascade="all, delete-orphan")
    activities = relationship("DailyActivity", back_populates="child", cascade="all, delete-orphan")
    
    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
