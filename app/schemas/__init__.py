"""Pydantic schemas for request/response validation."""

from app.schemas.booking import (
    BookingListResponse,
    BookingResponse,
    JobsResponse,
    StatusHistoryEntry,
    StatusTransitionRequest,
)
from app.schemas.user import (
    RefreshTokenRequest,
    TokenResponse,
    UserLogin,
    UserResponse,
)

__all__ = [
    # Booking
    "BookingResponse",
    "BookingListResponse",
    "StatusTransitionRequest",
    "JobsResponse",
    "StatusHistoryEntry",
    # User
    "UserLogin",
    "RefreshTokenRequest",
    "TokenResponse",
    "UserResponse",
]
