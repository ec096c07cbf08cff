"""Staff job projections over a booking collection."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from app.domain.actor import UserRole
from app.domain.booking_state import ACTIVE_JOB_STATUSES, BookingStatus


@dataclass(frozen=True)
class JobProjection:
    """Read-only partition of bookings for the staff view.

    Bookings that are neither active nor completed (pending, confirmed,
    cancelled) appear in neither list.
    """

    active_jobs: tuple[Any, ...]
    completed_jobs: tuple[Any, ...]

    @property
    def active_count(self) -> int:
        return len(self.active_jobs)

    @property
    def completed_count(self) -> int:
        return len(self.completed_jobs)


def project_jobs(bookings: Iterable[Any], role: str) -> JobProjection:
    """Partition bookings into active and completed jobs.

    Input order is preserved. Visibility filtering is the store's job, so
    the role does not change the partition; it is only validated.
    """
    UserRole(role)

    items = tuple(bookings)
    return JobProjection(
        active_jobs=tuple(b for b in items if BookingStatus(b.status) in ACTIVE_JOB_STATUSES),
        completed_jobs=tuple(b for b in items if BookingStatus(b.status) is BookingStatus.COMPLETED),
    )
