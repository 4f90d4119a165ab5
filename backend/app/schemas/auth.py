"""Authentication schemas."""
from pydantic import BaseModel, EmailStr


class UserLogin(BaseModel):
    """User login request."""
    
    email: EmailStr
    password: str


class Token(BaseModel):
    """Token response."""
    
    access_token: str
    token_type: str = "bearer"
    role: str
    expires_at: str


class UserResponse(BaseModel):
    """Account info response."""
    
    id: str
    email: str
    first_name: str
    last_name: str
    role: str
    parent_id: int | None = None
    teacher_id: int | None = None
    created_at: str
    
    class Config:
        from_attributes = True
