"""Database models."""

from app.models.admin import AuditLog
from app.models.booking import Booking
from app.models.user import User

__all__ = [
    "User",
    "Booking",
    "AuditLog",
]
