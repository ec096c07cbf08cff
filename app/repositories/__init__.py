"""Persistence adapters."""

from app.repositories.base import BookingStore
from app.repositories.bookings import SqlAlchemyBookingStore

__all__ = [
    "BookingStore",
    "SqlAlchemyBookingStore",
]
