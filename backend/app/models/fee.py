"""Fee model."""
from datetime import datetime

from sqlalchemy import Column, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import relationship

from app.database import Base

FEE_PENDING = "pending"
FEE_PAID = "paid"
FEE_OVERDUE = "overdue"


class Fee(Base):
    """Amount owed for a child.

    Status moves pending -> paid or pending -> overdue. The reminder sweep
    only ever looks at pending fees.
    """
    
    __tablename__ = "fees"
    __table_args__ = (
        Index("ix_fees_child_due", "child_id", "due_date"),
        Index("ix_fees_status", "status"),
        {"sqlite_autoincrement": True},
    )
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    child_id = Column(Integer, ForeignKey("children.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    description = Column(String(200), nullable=False)
    due_date = Column(String(10), nullable=False)  # YYYY-MM-DD
    paid_date = Column(String(26))
    status = Column(String(20), nullable=False, default=FEE_PENDING)
    fee_type = Column(String(20), nullable=False, default="monthly")  # monthly, one-time, late-fee
    notes = Column(String(500))
    created_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String(26))
    
    # Relationships
    child = relationship("Child", back_populates="fees")
