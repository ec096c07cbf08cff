"""API dependencies for authentication and common operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthenticationError, AuthorizationError
from app.core.security import verify_token
from app.database import get_db
from app.domain.actor import Actor
from app.models.user import User
from app.repositories.base import BookingStore
from app.repositories.bookings import SqlAlchemyBookingStore
from app.services.booking_lifecycle_service import BookingLifecycleService

# Security scheme
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    payload = verify_token(credentials.credentials, token_type="access")
    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token payload")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        raise AuthenticationError("Invalid token payload")

    result = await db.execute(select(User).where(User.id == user_uuid))
    user = result.scalar_one_or_none()

    if not user:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthenticationError("User account is deactivated")

    return user


async def get_current_active_user(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Get current user and verify they are active."""
    if not current_user.is_active:
        raise AuthorizationError("User account is deactivated")
    return current_user


async def get_current_actor(
    current_user: Annotated[User, Depends(get_current_active_user)],
) -> Actor:
    """Identity and role of the caller, as consumed by the lifecycle service."""
    return Actor.from_user(current_user)


async def get_booking_store(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingStore:
    """Request-scoped booking store."""
    return SqlAlchemyBookingStore(db)


async def get_lifecycle_service(
    store: Annotated[BookingStore, Depends(get_booking_store)],
) -> BookingLifecycleService:
    """Lifecycle service bound to the request's booking store."""
    return BookingLifecycleService(store)
