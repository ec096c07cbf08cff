"""SQLAlchemy booking store."""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BookingNotFound, ConcurrentModification
from app.domain.actor import Actor, UserRole
from app.models.booking import Booking
from app.repositories.base import BookingStore

logger = logging.getLogger(__name__)


class SqlAlchemyBookingStore(BookingStore):
    """Booking store backed by an async SQLAlchemy session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _load(self, booking_id: UUID) -> Booking | None:
        result = await self.db.execute(
            select(Booking)
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def fetch_booking(self, booking_id: UUID) -> Booking:
        booking = await self._load(booking_id)
        if booking is None:
            raise BookingNotFound(booking_id)
        return booking

    async def fetch_bookings_visible_to(self, actor: Actor) -> list[Booking]:
        query = select(Booking).execution_options(populate_existing=True)
        if actor.role is UserRole.STAFF:
            query = query.where(Booking.assigned_staff_id == actor.id)
        elif actor.role is UserRole.CUSTOMER:
            query = query.where(Booking.customer_id == actor.id)

        query = query.order_by(Booking.scheduled_date, Booking.scheduled_time, Booking.booking_number)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def update_status(
        self,
        booking_id: UUID,
        expected_status: str,
        new_status: str,
        **changes: Any,
    ) -> Booking:
        # Compare-and-swap on status: the WHERE clause carries the observed value
        result = await self.db.execute(
            update(Booking)
            .where(Booking.id == booking_id, Booking.status == expected_status)
            .values(status=new_status, **changes)
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            if await self._load(booking_id) is None:
                raise BookingNotFound(booking_id)
            logger.warning(
                "Status write lost race: booking=%s expected=%s target=%s",
                booking_id,
                expected_status,
                new_status,
            )
            raise ConcurrentModification(booking_id, expected_status)

        return await self.fetch_booking(booking_id)
