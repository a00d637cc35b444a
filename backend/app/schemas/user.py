from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

from app.models.user import UserRole, UserStatus


class UserCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.USER
    status: Optional[UserStatus] = None


class UserUpdate(BaseModel):
    """Admin edit; every field optional, only provided ones are applied"""
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None


class UserResponse(BaseModel):
    """Account projection; the password hash is never exposed"""
    id: str
    name: str
    email: str
    role: UserRole
    status: UserStatus
    avatar: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserFilters(BaseModel):
    """Listing filters as requested by the caller, before visibility rules apply"""
    search: Optional[str] = None
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None
