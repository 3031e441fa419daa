# app/schemas/user.py
from pydantic import BaseModel, EmailStr, Field
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Optional
from app.models.enums import UserRole


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str = Field(min_length=1)
    role: UserRole = UserRole.employee
    department: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserOut(BaseModel):
    id: int
    email: str
    name: str
    role: str
    department: Optional[str]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class AuthResponse(BaseModel):
    user: UserOut


class UserProfile(BaseModel):
    """Profile row served by the identity provider, keyed by its user id."""
    id: str
    email: str
    name: Optional[str] = None
    role: Optional[str] = None
    department: Optional[str] = None
    created_at: Optional[datetime] = None
