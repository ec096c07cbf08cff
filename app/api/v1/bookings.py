"""Booking endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import (
    get_booking_store,
    get_current_actor,
    get_db,
    get_lifecycle_service,
)
from app.core.exceptions import BookingNotFound
from app.core.middleware import transition_limiter
from app.core.permissions import require_audit_access
from app.domain.actor import Actor, UserRole
from app.domain.booking_state import BookingStatus
from app.repositories.base import BookingStore
from app.schemas.booking import (
    BookingListResponse,
    BookingResponse,
    StatusHistoryEntry,
    StatusTransitionRequest,
)
from app.services.audit_service import audit_service
from app.services.booking_lifecycle_service import BookingLifecycleService

router = APIRouter()


async def _visible_booking(store: BookingStore, booking_id: UUID, actor: Actor):
    booking = await store.fetch_booking(booking_id)
    # Bookings outside the caller's view look the same as missing ones
    if actor.role is UserRole.STAFF and booking.assigned_staff_id != actor.id:
        raise BookingNotFound(booking_id)
    if actor.role is UserRole.CUSTOMER and booking.customer_id != actor.id:
        raise BookingNotFound(booking_id)
    return booking


async def _transition(
    service: BookingLifecycleService,
    db: AsyncSession,
    booking_id: UUID,
    target: BookingStatus,
    actor: Actor,
    assigned_staff_id: UUID | None = None,
) -> BookingResponse:
    # One read serves the visibility check, the conditional write and the audit row
    before = await _visible_booking(service.store, booking_id, actor)
    old_status = before.status

    booking = await service.request_transition(
        booking_id, target, actor, assigned_staff_id=assigned_staff_id, snapshot=before
    )
    await audit_service.log_status_change(
        db,
        user_id=actor.id,
        booking_id=booking_id,
        old_status=old_status,
        new_status=booking.status,
        role=actor.role.value,
    )
    return BookingResponse.for_role(booking, actor.role)


@router.get("/", response_model=BookingListResponse)
async def list_bookings(
    actor: Annotated[Actor, Depends(get_current_actor)],
    store: Annotated[BookingStore, Depends(get_booking_store)],
) -> BookingListResponse:
    """Bookings visible to the caller, ordered by schedule."""
    bookings = await store.fetch_bookings_visible_to(actor)
    return BookingListResponse(
        bookings=[BookingResponse.for_role(b, actor.role) for b in bookings],
        total=len(bookings),
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: UUID,
    actor: Annotated[Actor, Depends(get_current_actor)],
    store: Annotated[BookingStore, Depends(get_booking_store)],
) -> BookingResponse:
    """Get a booking by ID."""
    booking = await _visible_booking(store, booking_id, actor)
    return BookingResponse.for_role(booking, actor.role)


@router.post(
    "/{booking_id}/status",
    response_model=BookingResponse,
    dependencies=[Depends(transition_limiter)],
)
async def transition_booking(
    booking_id: UUID,
    request: StatusTransitionRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    service: Annotated[BookingLifecycleService, Depends(get_lifecycle_service)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingResponse:
    """Move a booking to a new status."""
    return await _transition(
        service, db, booking_id, request.status, actor, request.assigned_staff_id
    )


@router.post(
    "/{booking_id}/start",
    response_model=BookingResponse,
    dependencies=[Depends(transition_limiter)],
)
async def start_job(
    booking_id: UUID,
    actor: Annotated[Actor, Depends(get_current_actor)],
    service: Annotated[BookingLifecycleService, Depends(get_lifecycle_service)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingResponse:
    """Start an assigned job."""
    return await _transition(service, db, booking_id, BookingStatus.IN_PROGRESS, actor)


@router.post(
    "/{booking_id}/complete",
    response_model=BookingResponse,
    dependencies=[Depends(transition_limiter)],
)
async def complete_job(
    booking_id: UUID,
    actor: Annotated[Actor, Depends(get_current_actor)],
    service: Annotated[BookingLifecycleService, Depends(get_lifecycle_service)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingResponse:
    """Mark a job in progress as completed."""
    return await _transition(service, db, booking_id, BookingStatus.COMPLETED, actor)


@router.get(
    "/{booking_id}/history",
    response_model=list[StatusHistoryEntry],
    dependencies=[Depends(require_audit_access)],
)
async def booking_history(
    booking_id: UUID,
    store: Annotated[BookingStore, Depends(get_booking_store)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[StatusHistoryEntry]:
    """Audited status changes for a booking."""
    await store.fetch_booking(booking_id)
    entries = await audit_service.status_history(db, booking_id)
    return [StatusHistoryEntry.model_validate(e) for e in entries]
