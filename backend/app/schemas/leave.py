"""Teacher leave and assignment schemas."""
from datetime import date

from pydantic import BaseModel, Field


class LeaveRequestCreate(BaseModel):
    """A teacher asking for days off."""
    
    start_date: date
    end_date: date
    reason: str | None = Field(None, max_length=1000)


class AdminLeaveCreate(LeaveRequestCreate):
    """Leave recorded by an admin on a teacher's behalf."""
    
    teacher_id: int
    approve: bool = True


class LeaveResponse(BaseModel):
    id: int
    teacher_id: int
    teacher_name: str
    start_date: str
    end_date: str
    days: int
    reason: str | None
    status: str
    requested_at: str
    decided_at: str | None


class LeaveBalanceResponse(BaseModel):
    year: int
    annual_allocation: int
    used_days: int
    remaining_days: int


class ChildAssignment(BaseModel):
    child_id: int


class AssignedChildResponse(BaseModel):
    child_id: int
    child_name: str
    assigned_at: str
