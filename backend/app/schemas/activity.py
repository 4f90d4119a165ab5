"""Daily activity, attendance and message schemas."""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from app.models.activity import ACTIVITY_TYPES


def _known_activity_type(value: str | None) -> str | None:
    if value is not None and value not in ACTIVITY_TYPES:
        raise ValueError(f"activity_type must be one of: {', '.join(ACTIVITY_TYPES)}")
    return value


class ActivityCreate(BaseModel):
    child_id: int
    activity_type: str = Field(..., min_length=1, max_length=30)  # Eat, Nap, Play, Diaper, ...
    activity_time: datetime
    duration_minutes: int | None = Field(None, ge=0, le=1440)
    food_item: str | None = Field(None, max_length=200)
    notes: str | None = None
    
    @field_validator("activity_type")
    @classmethod
    def validate_activity_type(cls, v: str) -> str:
        return _known_activity_type(v)


class ActivityUpdate(BaseModel):
    activity_type: str | None = Field(None, min_length=1, max_length=30)
    activity_time: datetime | None = None
    duration_minutes: int | None = Field(None, ge=0, le=1440)
    food_item: str | None = Field(None, max_length=200)
    notes: str | None = None
    
    @field_validator("activity_type")
    @classmethod
    def validate_activity_type(cls, v: str | None) -> str | None:
        return _known_activity_type(v)


class ActivityResponse(BaseModel):
    id: int
    child_id: int
    child_name: str
    activity_type: str
    activity_time: str
    duration_minutes: int | None
    food_item: str | None
    notes: str | None
    created_at: str


class CheckInRequest(BaseModel):
    child_id: int
    notes: str | None = None


class CheckOutRequest(BaseModel):
    notes: str | None = None


class AttendanceResponse(BaseModel):
    id: int
    child_id: int
    date: str
    check_in_time: str
    check_out_time: str | None
    check_in_notes: str | None
    check_out_notes: str | None
    
    class Config:
        from_attributes = True


class MessageCreate(BaseModel):
    recipient_id: str
    content: str = Field(..., min_length=1, max_length=4000)


class MessageOut(BaseModel):
    id: int
    sender_id: str
    recipient_id: str
    content: str
    is_read: bool = Field(validation_alias="read")
    sent_at: str
    
    @field_validator("is_read", mode="before")
    @classmethod
    def int_to_bool(cls, v: Any) -> bool:
        if isinstance(v, int):
            return bool(v)
        return v
    
    class Config:
        from_attributes = True
        populate_by_name = True


class UnreadMessagesResponse(BaseModel):
    count: int
