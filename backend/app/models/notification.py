"""Notification model for reminders and announcements."""
from datetime import datetime

from sqlalchemy import Column, Index, Integer, String, Text

from app.database import Base

BIRTHDAY = "Birthday"
FEE_REMINDER = "FeeReminder"
FEE_OVERDUE = "FeeOverdue"
NEW_EVENT = "NewEvent"
EVENT_REGISTRATION = "EventRegistration"
NEW_FEE = "NewFee"
GENERAL = "General"


class Notification(Base):
    """In-app notification.

    ``user_id`` is the target identity (``parent:<id>`` or ``teacher:<id>``);
    empty means visible to privileged roles only. It is never changed after
    creation, and ``read`` only ever goes from 0 to 1.
    """
    
    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_user_unread", "user_id", "read"),
        Index("ix_notifications_created", "created_at"),
    )
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(String(30), nullable=False)
    
    # Content
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    redirect_url = Column(String(255))
    
    # Target identity, None/empty = broadcast to Admin and Teacher
    user_id = Column(String(50), index=True)
    
    # Set by the reminder sweep: <Type>:<entity>:<id>[:<YYYY-MM-DD>]
    dedup_key = Column(String(120), unique=True)
    
    # Status
    read = Column(Integer, default=0)  # SQLite boolean
    read_at = Column(String(26))
    
    # Timestamps
    created_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
