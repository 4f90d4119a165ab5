"""Direct message model."""
from datetime import datetime

from sqlalchemy import Column, ForeignKey, Index, Integer, String, Text

from app.database import Base


class Message(Base):
    """Message between two accounts."""
    
    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_pair_sent", "sender_id", "recipient_id", "sent_at"),
    )
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    sender_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    recipient_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    read = Column(Integer, default=0)  # SQLite boolean
    sent_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
