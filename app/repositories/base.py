"""Booking persistence interface.

The lifecycle service talks to storage only through this interface.
Adapters hold no business rules: they read, and they perform the
conditional status write.
"""

from abc import ABC, abstractmethod
from typing import Any
from uuid import UUID

from app.domain.actor import Actor
from app.models.booking import Booking


class BookingStore(ABC):
    """Abstract base class for booking storage."""

    @abstractmethod
    async def fetch_booking(self, booking_id: UUID) -> Booking:
        """Load a booking.

        Raises:
            BookingNotFound: If the identifier does not resolve
        """

    @abstractmethod
    async def fetch_bookings_visible_to(self, actor: Actor) -> list[Booking]:
        """Bookings the actor may see, ordered by schedule."""

    @abstractmethod
    async def update_status(
        self,
        booking_id: UUID,
        expected_status: str,
        new_status: str,
        **changes: Any,
    ) -> Booking:
        """Set ``new_status`` only if the stored status is still ``expected_status``.

        Args:
            booking_id: Booking to update
            expected_status: Status observed when the caller read the booking
            new_status: Status to write
            **changes: Extra columns written in the same statement (timestamps etc.)

        Returns:
            The booking as stored after the write

        Raises:
            BookingNotFound: If the booking no longer exists
            ConcurrentModification: If the stored status differs from ``expected_status``
        """
