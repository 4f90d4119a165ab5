"""Parent model."""
from datetime import datetime

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base


class Parent(Base):
    """Parent or guardian of enrolled children."""
    
    __tablename__ = "parents"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone_number = Column(String(20), nullable=False)
    address = Column(String(500))
    emergency_contact = Column(String(20))
    is_active = Column(Integer, default=1)  # SQLite boolean
    created_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String(26), onupdate=lambda: datetime.utcnow().isoformat())
    
    # Relationships
    children = relationship("Child", back_populates="parent", cascade="all, delete-orphan")
    user_account = relationship("User", back_populates="parent", uselist=False)
    
    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
