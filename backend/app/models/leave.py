"""Teacher leave request model."""
from datetime import datetime

from sqlalchemy import Column, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base

LEAVE_PENDING = "Pending"
LEAVE_APPROVED = "Approved"
LEAVE_REJECTED = "Rejected"


class LeaveRequest(Base):
    """Days off asked for by a teacher.

    ``days`` counts both ends of the range. Only pending requests can be
    approved or rejected, and approved days count against the teacher's
    yearly allowance for the year the leave starts in.
    """
    
    __tablename__ = "leave_requests"
    __table_args__ = (
        Index("ix_leave_requests_teacher_status", "teacher_id", "status"),
    )
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    teacher_id = Column(Integer, ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False)
    start_date = Column(String(10), nullable=False)  # YYYY-MM-DD
    end_date = Column(String(10), nullable=False)  # YYYY-MM-DD
    days = Column(Integer, nullable=False)
    reason = Column(String(1000))
    status = Column(String(20), nullable=False, default=LEAVE_PENDING)
    requested_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
    decided_at = Column(String(26))
    decided_by = Column(String(36))  # users.id
    
    # Relationships
    teacher = relationship("Teacher", back_populates="leave_requests")
