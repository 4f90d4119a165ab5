"""Holiday and event schemas."""
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, field_validator


class HolidayCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    date: date
    is_recurring: bool = False
    recurrence_type: str | None = Field(None, max_length=20)  # yearly, monthly
    color: str = Field("#FF6B6B", pattern=r"^#[0-9A-Fa-f]{6}$")


class HolidayUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    is_recurring: bool | None = None
    recurrence_type: str | None = Field(None, max_length=20)
    color: str | None = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")


class HolidayResponse(BaseModel):
    id: int
    name: str
    description: str | None
    date: str
    is_recurring: bool
    recurrence_type: str | None
    color: str
    created_at: str
    
    @field_validator("is_recurring", mode="before")
    @classmethod
    def int_to_bool(cls, v: Any) -> bool:
        if isinstance(v, int):
            return bool(v)
        return v
    
    class Config:
        from_attributes = True


class EventCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    type: str = Field(..., min_length=1, max_length=50)
    description: str | None = None
    price: Decimal = Field(Decimal("0"), ge=0)
    age_from: int | None = Field(None, ge=0)
    age_to: int | None = Field(None, ge=0)
    capacity: int = Field(..., gt=0)
    time: datetime


class EventUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    price: Decimal | None = Field(None, ge=0)
    capacity: int | None = Field(None, gt=0)
    time: datetime | None = None


class EventResponse(BaseModel):
    id: int
    name: str
    type: str
    description: str | None
    price: Decimal | None
    age_from: int | None
    age_to: int | None
    capacity: int
    time: str
    registered_count: int = 0
    created_at: str
    
    class Config:
        from_attributes = True


class ParticipantCreate(BaseModel):
    child_id: int
    notes: str | None = None


class ParticipantResponse(BaseModel):
    id: int
    event_id: int
    child_id: int
    child_name: str
    status: str
    notes: str | None
    registered_at: str
