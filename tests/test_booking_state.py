"""
Tests for the booking state machine and role permission table
"""
import itertools

import pytest

from app.core.exceptions import InvalidTransition, TransitionForbidden
from app.domain.actor import UserRole
from app.domain.booking_state import (
    BOOKING_TRANSITIONS,
    ROLE_TRANSITIONS,
    TERMINAL_STATUSES,
    BookingStatus,
    allowed_targets,
    assert_booking_transition,
    can_complete,
    can_start,
    is_terminal,
    reachable_targets,
)
from tests.conftest import make_booking

S = BookingStatus

EXPECTED_EDGES = {
    (S.PENDING, S.CONFIRMED),
    (S.PENDING, S.CANCELLED),
    (S.CONFIRMED, S.ASSIGNED),
    (S.CONFIRMED, S.CANCELLED),
    (S.ASSIGNED, S.IN_PROGRESS),
    (S.ASSIGNED, S.CANCELLED),
    (S.IN_PROGRESS, S.COMPLETED),
    (S.IN_PROGRESS, S.CANCELLED),
}

STAFF_EDGES = {(S.ASSIGNED, S.IN_PROGRESS), (S.IN_PROGRESS, S.COMPLETED)}


class TestTransitionTable:
    """Shape of the transition and permission tables"""

    def test_edges_match_lifecycle(self):
        edges = {(src, dst) for src, targets in BOOKING_TRANSITIONS.items() for dst in targets}
        assert edges == EXPECTED_EDGES

    def test_every_status_has_an_entry(self):
        assert set(BOOKING_TRANSITIONS) == set(BookingStatus)

    def test_terminal_states_have_no_outgoing_edges(self):
        assert TERMINAL_STATUSES == {S.COMPLETED, S.CANCELLED}
        for status in TERMINAL_STATUSES:
            assert BOOKING_TRANSITIONS[status] == frozenset()
            for role in UserRole:
                assert allowed_targets(status, role) == frozenset()

    def test_role_permissions_are_subset_of_transitions(self):
        for (status, _role), targets in ROLE_TRANSITIONS.items():
            assert targets <= BOOKING_TRANSITIONS[status]

    def test_customer_has_no_edges(self):
        assert reachable_targets(UserRole.CUSTOMER) == frozenset()

    def test_staff_reachable_targets(self):
        assert reachable_targets(UserRole.STAFF) == {S.IN_PROGRESS, S.COMPLETED}

    def test_admin_can_cancel_every_non_terminal_status(self):
        for status in BookingStatus:
            if status in TERMINAL_STATUSES:
                continue
            assert S.CANCELLED in allowed_targets(status, UserRole.ADMIN)

    def test_is_terminal(self):
        assert is_terminal("completed")
        assert is_terminal("cancelled")
        assert not is_terminal("in_progress")


class TestAssertBookingTransition:
    """Validation of (current, target, role) requests"""

    @pytest.mark.parametrize(
        "current,target,role",
        list(itertools.product(BookingStatus, BookingStatus, UserRole)),
    )
    def test_succeeds_iff_edge_exists_and_role_permitted(self, current, target, role):
        permitted = (current, target) in EXPECTED_EDGES and (
            role is UserRole.ADMIN or (role is UserRole.STAFF and (current, target) in STAFF_EDGES)
        )
        if permitted:
            assert_booking_transition(current, target, role)
        else:
            with pytest.raises((InvalidTransition, TransitionForbidden)):
                assert_booking_transition(current, target, role)

    def test_staff_cannot_assign(self):
        with pytest.raises(TransitionForbidden):
            assert_booking_transition("pending", "assigned", "staff")

    def test_staff_cannot_confirm(self):
        with pytest.raises(TransitionForbidden):
            assert_booking_transition("pending", "confirmed", "staff")

    def test_staff_cannot_cancel(self):
        with pytest.raises(TransitionForbidden):
            assert_booking_transition("in_progress", "cancelled", "staff")

    def test_staff_cannot_skip_to_completed(self):
        with pytest.raises(InvalidTransition):
            assert_booking_transition("assigned", "completed", "staff")

    def test_admin_cannot_leave_completed(self):
        with pytest.raises(InvalidTransition) as exc_info:
            assert_booking_transition("completed", "cancelled", "admin")
        assert exc_info.value.current == "completed"
        assert exc_info.value.target == "cancelled"

    def test_admin_cannot_skip_assignment(self):
        with pytest.raises(InvalidTransition):
            assert_booking_transition("confirmed", "in_progress", "admin")

    def test_customer_is_always_forbidden(self):
        with pytest.raises(TransitionForbidden):
            assert_booking_transition("pending", "cancelled", "customer")

    def test_unknown_status_is_rejected(self):
        with pytest.raises(ValueError):
            assert_booking_transition("archived", "completed", "admin")


class TestPredicates:
    """can_start / can_complete"""

    @pytest.mark.parametrize("status", list(BookingStatus))
    def test_can_start_only_when_assigned(self, status):
        assert can_start(make_booking(status.value)) is (status is S.ASSIGNED)

    @pytest.mark.parametrize("status", list(BookingStatus))
    def test_can_complete_only_when_in_progress(self, status):
        assert can_complete(make_booking(status.value)) is (status is S.IN_PROGRESS)
