"""Booking-related Pydantic schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.domain.booking_state import (
    BookingStatus,
    allowed_targets,
    can_complete,
    can_start,
    is_terminal,
)
from app.domain.job_projection import JobProjection
from app.models.booking import Booking


class BookingResponse(BaseModel):
    """Schema for booking response.

    The action flags are computed for the caller's role so clients never
    re-derive transition rules.
    """

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    booking_number: str
    customer_id: UUID | None

    # Job details
    package_name: str | None
    customer_name: str
    customer_phone: str | None
    address_line1: str
    city: str
    notes: str | None

    # Schedule
    scheduled_date: date
    scheduled_time: str

    # Status
    status: BookingStatus
    assigned_staff_id: UUID | None
    cancelled_by: str | None

    # Timestamps
    confirmed_at: datetime | None
    assigned_at: datetime | None
    started_at: datetime | None
    completed_at: datetime | None
    cancelled_at: datetime | None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # Derived for the caller
    is_terminal: bool = False
    can_start: bool = False
    can_complete: bool = False
    allowed_transitions: list[BookingStatus] = Field(default_factory=list)

    @classmethod
    def for_role(cls, booking: Booking, role: str) -> "BookingResponse":
        """Build the response with action flags for ``role``."""
        response = cls.model_validate(booking)
        targets = allowed_targets(booking.status, role)
        response.is_terminal = is_terminal(booking.status)
        response.can_start = can_start(booking) and BookingStatus.IN_PROGRESS in targets
        response.can_complete = can_complete(booking) and BookingStatus.COMPLETED in targets
        # Keep table order stable for clients
        response.allowed_transitions = [s for s in BookingStatus if s in targets]
        return response


class BookingListResponse(BaseModel):
    """Schema for a booking list."""

    bookings: list[BookingResponse]
    total: int


class StatusTransitionRequest(BaseModel):
    """Schema for requesting a status change."""

    status: BookingStatus
    assigned_staff_id: UUID | None = None


class JobsResponse(BaseModel):
    """Staff dashboard: active and completed jobs with their counts."""

    active_jobs: list[BookingResponse]
    completed_jobs: list[BookingResponse]
    active_count: int
    completed_count: int

    @classmethod
    def from_projection(cls, projection: JobProjection, role: str) -> "JobsResponse":
        return cls(
            active_jobs=[BookingResponse.for_role(b, role) for b in projection.active_jobs],
            completed_jobs=[BookingResponse.for_role(b, role) for b in projection.completed_jobs],
            active_count=projection.active_count,
            completed_count=projection.completed_count,
        )


class StatusHistoryEntry(BaseModel):
    """One audited status change."""

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID | None
    actor_role: str | None = None
    old_values: dict | None
    new_values: dict | None
    created_at: datetime | None = None
