"""User and authentication Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.domain.actor import UserRole


class UserLogin(BaseModel):
    """Schema for email/password login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshTokenRequest(BaseModel):
    """Schema for refreshing tokens."""

    refresh_token: str


class TokenResponse(BaseModel):
    """Schema for issued tokens."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    """Schema for user response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    role: UserRole
    full_name: str | None
    phone: str | None
    is_active: bool
    display_name: str
    created_at: datetime | None = None
    last_login_at: datetime | None = None
