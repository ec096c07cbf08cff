"""Booking lifecycle service: validated, optimistic status transitions."""

import logging
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from app.core.exceptions import (
    ConcurrentModification,
    InvalidTransition,
    TransitionForbidden,
    ValidationError,
)
from app.domain.actor import Actor, UserRole
from app.domain.booking_state import (
    STATUS_TIMESTAMP_FIELDS,
    BookingStatus,
    assert_booking_transition,
)
from app.domain.job_projection import JobProjection, project_jobs
from app.models.booking import Booking
from app.repositories.base import BookingStore

logger = logging.getLogger(__name__)


class BookingLifecycleService:
    """Owns booking status changes and the staff job views."""

    def __init__(self, store: BookingStore):
        self.store = store

    async def request_transition(
        self,
        booking_id: UUID,
        target_status: str,
        actor: Actor,
        assigned_staff_id: UUID | None = None,
        snapshot: Booking | None = None,
    ) -> Booking:
        """Move a booking to ``target_status`` on behalf of ``actor``.

        The write is conditioned on the status observed here; a concurrent
        change surfaces as ConcurrentModification and nothing is retried.
        Callers that already hold the booking pass it as ``snapshot`` so the
        status they record is exactly the one the write was conditioned on.

        Args:
            booking_id: Booking to transition
            target_status: Requested status
            actor: Authenticated identity requesting the change
            assigned_staff_id: Staff member to record when entering ``assigned``
            snapshot: Booking already read by the caller; fetched when omitted

        Returns:
            Updated booking snapshot

        Raises:
            BookingNotFound: Unknown booking
            TransitionForbidden: Role may not take this edge (customers never may)
            InvalidTransition: Edge does not exist in the state machine
            ValidationError: Entering ``assigned`` without a staff member, or a
                staff member given for any other target. This is a request-shape
                error outside the lifecycle failures above: the edge and role
                checks have already passed when it is raised.
            ConcurrentModification: Status changed between read and write
        """
        target = BookingStatus(target_status)
        booking = snapshot if snapshot is not None else await self.store.fetch_booking(booking_id)
        current = BookingStatus(booking.status)

        try:
            if actor.role is UserRole.CUSTOMER:
                raise TransitionForbidden(actor.role.value, current.value, target.value)
            assert_booking_transition(current, target, actor.role)
        except (TransitionForbidden, InvalidTransition) as exc:
            logger.warning(
                "Rejected transition: booking=%s actor=%s role=%s %s → %s (%s)",
                booking_id,
                actor.id,
                actor.role.value,
                current.value,
                target.value,
                exc.code,
            )
            raise

        changes = self._changes_for(booking, target, actor, assigned_staff_id)

        try:
            updated = await self.store.update_status(
                booking_id, current.value, target.value, **changes
            )
        except ConcurrentModification:
            logger.warning(
                "Concurrent modification: booking=%s actor=%s expected=%s",
                booking_id,
                actor.id,
                current.value,
            )
            raise

        logger.info(
            "Booking %s moved %s → %s by %s (%s)",
            booking_id,
            current.value,
            target.value,
            actor.id,
            actor.role.value,
        )
        return updated

    def _changes_for(
        self,
        booking: Booking,
        target: BookingStatus,
        actor: Actor,
        assigned_staff_id: UUID | None,
    ) -> dict[str, Any]:
        changes: dict[str, Any] = {STATUS_TIMESTAMP_FIELDS[target]: datetime.now(UTC)}

        if target is BookingStatus.ASSIGNED:
            staff_id = assigned_staff_id or booking.assigned_staff_id
            if staff_id is None:
                raise ValidationError("A staff member must be set before a booking is assigned")
            changes["assigned_staff_id"] = staff_id
        elif assigned_staff_id is not None:
            raise ValidationError("assigned_staff_id can only be given when assigning a booking")

        if target is BookingStatus.CANCELLED:
            changes["cancelled_by"] = actor.role.value

        return changes

    async def staff_jobs(self, actor: Actor) -> JobProjection:
        """Active and completed jobs among the bookings the actor can see."""
        bookings = await self.store.fetch_bookings_visible_to(actor)
        return project_jobs(bookings, actor.role)
