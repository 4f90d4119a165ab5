"""Notification schemas."""
from typing import Any

from pydantic import BaseModel, Field, field_validator


class NotificationResponse(BaseModel):
    id: int
    type: str
    title: str
    message: str
    redirect_url: str | None = None
    user_id: str | None = None
    is_read: bool = Field(validation_alias="read")
    created_at: str

    @field_validator("is_read", mode="before")
    @classmethod
    def int_to_bool(cls, v: Any) -> bool:
        if isinstance(v, int):
            return bool(v)
        return v

    class Config:
        from_attributes = True
        populate_by_name = True


class UnreadCountResponse(BaseModel):
    count: int


class MarkAllReadResponse(BaseModel):
    updated: int


class CheckRemindersResponse(BaseModel):
    message: str
    day: str
    birthday_reminders: int
    fee_reminders: int
    overdue_fees: int
    overdue_notifications: int
