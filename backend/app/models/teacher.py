"""Teacher and teacher-child assignment models."""
from datetime import datetime

from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.database import Base


class Teacher(Base):
    """Daycare staff member."""
    
    __tablename__ = "teachers"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(20))
    specialization = Column(String(100))
    hire_date = Column(String(10))  # YYYY-MM-DD
    annual_leave_days = Column(Integer, nullable=False, default=20)
    is_active = Column(Integer, default=1)  # SQLite boolean
    created_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String(26), onupdate=lambda: datetime.utcnow().isoformat())
    
    # Relationships
    user_account = relationship("User", back_populates="teacher", uselist=False)
    assignments = relationship("TeacherChild", back_populates="teacher", cascade="all, delete-orphan")
    leave_requests = relationship("LeaveRequest", back_populates="teacher", cascade="all, delete-orphan")


class TeacherChild(Base):
    """A child placed in a teacher's care."""
    
    __tablename__ = "teacher_children"
    __table_args__ = (
        UniqueConstraint("teacher_id", "child_id", name="uq_teacher_child"),
    )
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    teacher_id = Column(Integer, ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False)
    child_id = Column(Integer, ForeignKey("children.id", ondelete="CASCADE"), nullable=False)
    assigned_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
    
    # Relationships
    teacher = relationship("Teacher", back_populates="assignments")
    child = relationship("Child")
