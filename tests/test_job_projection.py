"""
Tests for staff job projections
"""
import pytest

from app.domain.actor import UserRole
from app.domain.job_projection import project_jobs
from tests.conftest import make_booking


@pytest.fixture
def one_of_each():
    """Fixture providing one booking per status, in lifecycle order"""
    return [
        make_booking("pending"),
        make_booking("assigned"),
        make_booking("in_progress"),
        make_booking("completed"),
        make_booking("cancelled"),
    ]


def test_partitions_active_and_completed(one_of_each):
    projection = project_jobs(one_of_each, UserRole.STAFF)

    assert [b.status for b in projection.active_jobs] == ["assigned", "in_progress"]
    assert [b.status for b in projection.completed_jobs] == ["completed"]
    assert projection.active_count == 2
    assert projection.completed_count == 1


def test_pending_and_confirmed_appear_in_neither():
    pending = make_booking("pending")
    confirmed = make_booking("confirmed")

    projection = project_jobs([pending, confirmed], UserRole.ADMIN)

    assert projection.active_jobs == ()
    assert projection.completed_jobs == ()


def test_preserves_input_order():
    later = make_booking("in_progress", scheduled_time="16:00")
    earlier = make_booking("assigned", scheduled_time="08:00")
    done_b = make_booking("completed", booking_number="HR-BBBBBB")
    done_a = make_booking("completed", booking_number="HR-AAAAAA")

    projection = project_jobs([later, done_b, earlier, done_a], UserRole.STAFF)

    assert list(projection.active_jobs) == [later, earlier]
    assert list(projection.completed_jobs) == [done_b, done_a]


def test_is_deterministic(one_of_each):
    first = project_jobs(one_of_each, UserRole.STAFF)
    second = project_jobs(one_of_each, UserRole.STAFF)

    assert first == second


def test_accepts_any_iterable(one_of_each):
    projection = project_jobs(iter(one_of_each), "staff")

    assert projection.active_count == 2


def test_empty_input():
    projection = project_jobs([], UserRole.STAFF)

    assert projection.active_count == 0
    assert projection.completed_count == 0


def test_rejects_unknown_role(one_of_each):
    with pytest.raises(ValueError):
        project_jobs(one_of_each, "janitor")
