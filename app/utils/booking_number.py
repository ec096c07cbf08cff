"""Booking number generation."""

import random
import string

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings

BOOKING_NUMBER_CHARS = string.ascii_uppercase + string.digits


def random_booking_number(prefix: str | None = None) -> str:
    """Booking number like 'HR-A3B7K9' (not checked for uniqueness)."""
    random_part = "".join(random.choices(BOOKING_NUMBER_CHARS, k=6))
    return f"{prefix or settings.booking_number_prefix}-{random_part}"


async def generate_booking_number(db: AsyncSession) -> str:
    """Generate a booking number that is not yet used.

    Args:
        db: Database session for uniqueness check

    Returns:
        str: Unique booking number like 'HR-A3B7K9'
    """
    from app.models.booking import Booking

    while True:
        booking_number = random_booking_number()
        result = await db.execute(
            select(Booking.id).where(Booking.booking_number == booking_number)
        )
        if result.scalar_one_or_none() is None:
            return booking_number
