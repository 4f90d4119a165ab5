"""Event and participation models."""
from datetime import datetime

from sqlalchemy import Column, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from app.database import Base


class Event(Base):
    """Activity children can be registered for."""
    
    __tablename__ = "events"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    type = Column(String(50), nullable=False)
    description = Column(Text)
    price = Column(Numeric(10, 2), default=0)
    age_from = Column(Integer)
    age_to = Column(Integer)
    capacity = Column(Integer, nullable=False)
    time = Column(String(26), nullable=False)  # ISO datetime
    created_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String(26), onupdate=lambda: datetime.utcnow().isoformat())
    
    # Relationships
    participants = relationship("EventParticipant", back_populates="event", cascade="all, delete-orphan")


class EventParticipant(Base):
    """A child's registration for an event."""
    
    __tablename__ = "event_participants"
    __table_args__ = (
        UniqueConstraint("event_id", "child_id", name="uq_event_participant"),
    )
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False)
    child_id = Column(Integer, ForeignKey("children.id", ondelete="CASCADE"), nullable=False)
    registered_by = Column(String(36))  # users.id
    status = Column(String(20), nullable=False, default="Registered")
    notes = Column(Text)
    registered_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
    
    # Relationships
    event = relationship("Event", back_populates="participants")
    child = relationship("Child")
