"""Parent, teacher and child schemas."""
from datetime import date

from pydantic import BaseModel, EmailStr, Field


class ParentCreate(BaseModel):
    """Request to register a parent. A password also creates their login."""
    
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone_number: str = Field(..., min_length=1, max_length=20)
    address: str | None = Field(None, max_length=500)
    emergency_contact: str | None = Field(None, max_length=20)
    password: str | None = Field(None, min_length=6, max_length=100)


class ParentUpdate(BaseModel):
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    phone_number: str | None = Field(None, max_length=20)
    address: str | None = Field(None, max_length=500)
    emergency_contact: str | None = Field(None, max_length=20)
    is_active: bool | None = None


class ParentResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone_number: str
    address: str | None
    emergency_contact: str | None
    is_active: bool
    created_at: str
    
    class Config:
        from_attributes = True


class TeacherCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str | None = Field(None, max_length=20)
    specialization: str | None = Field(None, max_length=100)
    hire_date: date | None = None
    annual_leave_days: int = Field(20, ge=0, le=365)
    password: str | None = Field(None, min_length=6, max_length=100)


class TeacherUpdate(BaseModel):
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=20)
    specialization: str | None = Field(None, max_length=100)
    hire_date: date | None = None
    annual_leave_days: int | None = Field(None, ge=0, le=365)
    is_active: bool | None = None


class TeacherResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: str | None
    specialization: str | None
    hire_date: str | None
    annual_leave_days: int
    is_active: bool
    created_at: str
    
    class Config:
        from_attributes = True


class ChildCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    date_of_birth: date
    gender: str | None = Field(None, max_length=20)
    allergies: str | None = None
    medical_notes: str | None = None
    parent_id: int


class ChildUpdate(BaseModel):
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    gender: str | None = Field(None, max_length=20)
    allergies: str | None = None
    medical_notes: str | None = None
    is_active: bool | None = None


class ChildResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    date_of_birth: str
    gender: str | None
    allergies: str | None
    medical_notes: str | None
    parent_id: int
    is_active: bool
    created_at: str
    
    class Config:
        from_attributes = True
