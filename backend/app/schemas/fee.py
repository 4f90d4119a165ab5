"""Fee schemas."""
from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field


class FeeCreate(BaseModel):
    """Request to bill a child."""
    
    child_id: int
    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    description: str = Field(..., min_length=1, max_length=200)
    due_date: date
    fee_type: str = Field("monthly", max_length=20)  # monthly, one-time, late-fee
    notes: str | None = Field(None, max_length=500)


class MonthlyFeesCreate(BaseModel):
    """Request to bill every active child the same monthly amount."""
    
    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    description: str = Field(..., min_length=1, max_length=200)
    due_date: date


class FeePayment(BaseModel):
    paid_date: date | None = None
    payment_notes: str | None = Field(None, max_length=500)


class FeeResponse(BaseModel):
    id: int
    child_id: int
    child_name: str
    parent_id: int
    parent_name: str
    parent_email: str
    amount: Decimal
    description: str
    due_date: str
    paid_date: str | None
    status: str
    fee_type: str
    notes: str | None
    days_overdue: int
    created_at: str


class FeeSummaryResponse(BaseModel):
    total_fees: int
    paid_fees: int
    pending_fees: int
    overdue_fees: int
    total_amount: Decimal
    paid_amount: Decimal
    pending_amount: Decimal
    overdue_amount: Decimal


class BulkFeesResponse(BaseModel):
    message: str
    count: int


class OverdueUpdateResponse(BaseModel):
    message: str
    count: int
