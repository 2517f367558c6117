"""User and authentication Pydantic schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RegisterRequest(BaseModel):
    """Schema for account registration."""

    email: EmailStr = Field(..., description="Login email address")
    password: str = Field(..., min_length=8, max_length=32, description="Plain-text password")


class LoginRequest(BaseModel):
    """Schema for password login."""

    email: EmailStr
    password: str = Field(..., min_length=8)


class UserResponse(BaseModel):
    """Public account information."""

    id: uuid.UUID
    email: str
    role: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """Authenticated user together with a bearer token."""

    user: UserResponse
    access_token: str
    token_type: str = "bearer"
