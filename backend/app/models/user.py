"""User account model."""
import uuid
from datetime import datetime

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base


class User(Base):
    """Login account. Role is Admin, Teacher or Parent."""
    
    __tablename__ = "users"
    
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    role = Column(String(20), nullable=False)
    
    # Profile links resolved into the caller identity
    parent_id = Column(Integer, ForeignKey("parents.id", ondelete="SET NULL"))
    teacher_id = Column(Integer, ForeignKey("teachers.id", ondelete="SET NULL"))
    
    is_active = Column(Integer, default=1)  # SQLite boolean
    created_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String(26), default=lambda: datetime.utcnow().isoformat(), onupdate=lambda: datetime.utcnow().isoformat())
    
    # Relationships
    parent = relationship("Parent", back_populates="user_account")
    teacher = relationship("Teacher", back_populates="user_account")
