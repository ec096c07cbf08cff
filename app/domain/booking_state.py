"""Booking state machine.

States: pending → confirmed → assigned → in_progress → completed,
with cancelled reachable from every non-terminal state.

Two tables drive everything:
- BOOKING_TRANSITIONS: which edges exist at all
- ROLE_TRANSITIONS: which of those edges each role may take
"""

from enum import Enum

from app.core.exceptions import InvalidTransition, TransitionForbidden
from app.domain.actor import UserRole


class BookingStatus(str, Enum):
    """Booking lifecycle status, in typical-flow order."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


INITIAL_STATUS = BookingStatus.PENDING
TERMINAL_STATUSES = frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED})
ACTIVE_JOB_STATUSES = frozenset({BookingStatus.ASSIGNED, BookingStatus.IN_PROGRESS})

BOOKING_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.ASSIGNED, BookingStatus.CANCELLED}),
    BookingStatus.ASSIGNED: frozenset({BookingStatus.IN_PROGRESS, BookingStatus.CANCELLED}),
    BookingStatus.IN_PROGRESS: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

# (from_status, role) -> targets that role may request. Missing keys mean no edges.
ROLE_TRANSITIONS: dict[tuple[BookingStatus, UserRole], frozenset[BookingStatus]] = {
    # Admin drives the whole lifecycle, including confirm, assign and cancel
    **{(status, UserRole.ADMIN): targets for status, targets in BOOKING_TRANSITIONS.items()},
    # Staff only start and finish jobs
    (BookingStatus.ASSIGNED, UserRole.STAFF): frozenset({BookingStatus.IN_PROGRESS}),
    (BookingStatus.IN_PROGRESS, UserRole.STAFF): frozenset({BookingStatus.COMPLETED}),
}

# Timestamp column stamped when a booking enters a status
STATUS_TIMESTAMP_FIELDS: dict[BookingStatus, str] = {
    BookingStatus.CONFIRMED: "confirmed_at",
    BookingStatus.ASSIGNED: "assigned_at",
    BookingStatus.IN_PROGRESS: "started_at",
    BookingStatus.COMPLETED: "completed_at",
    BookingStatus.CANCELLED: "cancelled_at",
}


def is_terminal(status: str) -> bool:
    return BookingStatus(status) in TERMINAL_STATUSES


def allowed_targets(status: str, role: str) -> frozenset[BookingStatus]:
    """Targets the given role may request from the given status."""
    return ROLE_TRANSITIONS.get((BookingStatus(status), UserRole(role)), frozenset())


def reachable_targets(role: str) -> frozenset[BookingStatus]:
    """Every status the role could ever request, from any source status."""
    role = UserRole(role)
    return frozenset().union(
        *(targets for (_, r), targets in ROLE_TRANSITIONS.items() if r is role)
    )


def assert_booking_transition(current: str, target: str, role: str) -> None:
    """Validate a transition request for a role.

    Raises:
        TransitionForbidden: role can never request ``target``, or may not take this edge
        InvalidTransition: ``current → target`` is not an edge of the state machine
    """
    current_status = BookingStatus(current)
    target_status = BookingStatus(target)
    actor_role = UserRole(role)

    if target_status not in reachable_targets(actor_role):
        raise TransitionForbidden(actor_role.value, current_status.value, target_status.value)

    if target_status not in BOOKING_TRANSITIONS[current_status]:
        raise InvalidTransition(current_status.value, target_status.value)

    if target_status not in allowed_targets(current_status, actor_role):
        raise TransitionForbidden(actor_role.value, current_status.value, target_status.value)


def can_start(booking) -> bool:
    """Staff may start the job."""
    return BookingStatus(booking.status) is BookingStatus.ASSIGNED


def can_complete(booking) -> bool:
    """Staff may mark the job completed."""
    return BookingStatus(booking.status) is BookingStatus.IN_PROGRESS
