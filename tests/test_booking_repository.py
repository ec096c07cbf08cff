"""
Tests for the SQLAlchemy booking store (in-memory SQLite)
"""
import uuid
from datetime import date

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from app import database
from app.core.exceptions import BookingNotFound, ConcurrentModification
from app.core.immutability import ImmutabilityViolationError, register_immutability_enforcement
from app.core.security import get_password_hash
from app.domain.actor import Actor, UserRole
from app.domain.booking_state import INITIAL_STATUS
from app.models.booking import Booking
from app.models.user import User
from app.repositories.bookings import SqlAlchemyBookingStore
from app.services.audit_service import audit_service
from app.services.booking_lifecycle_service import BookingLifecycleService
from tests.conftest import make_booking


async def _user(session, role: UserRole, email: str) -> User:
    user = User(
        id=uuid.uuid4(),
        email=email,
        password_hash=get_password_hash("secret-password"),
        role=role.value,
        full_name=email.split("@")[0],
        is_active=True,
    )
    session.add(user)
    await session.flush()
    return user


@pytest.fixture
async def people(db_session):
    """Fixture providing persisted staff, customer and admin users"""
    return {
        "staff": await _user(db_session, UserRole.STAFF, "staff@handrest.com"),
        "other_staff": await _user(db_session, UserRole.STAFF, "other@handrest.com"),
        "customer": await _user(db_session, UserRole.CUSTOMER, "customer@handrest.com"),
        "admin": await _user(db_session, UserRole.ADMIN, "admin@handrest.com"),
    }


@pytest.fixture
def repo(db_session):
    return SqlAlchemyBookingStore(db_session)


async def _persist(session, booking):
    session.add(booking)
    await session.flush()
    return booking


async def test_fetch_booking(repo, db_session):
    booking = await _persist(db_session, make_booking("confirmed"))

    loaded = await repo.fetch_booking(booking.id)

    assert loaded.id == booking.id
    assert loaded.status == "confirmed"


async def test_fetch_unknown_booking_raises(repo):
    with pytest.raises(BookingNotFound):
        await repo.fetch_booking(uuid.uuid4())


async def test_update_status_when_expected_matches(repo, db_session):
    booking = await _persist(db_session, make_booking("pending"))

    updated = await repo.update_status(booking.id, "pending", "confirmed")

    assert updated.status == "confirmed"
    assert (await repo.fetch_booking(booking.id)).status == "confirmed"


async def test_update_status_writes_extra_columns(repo, db_session, people):
    booking = await _persist(db_session, make_booking("confirmed"))

    updated = await repo.update_status(
        booking.id, "confirmed", "assigned", assigned_staff_id=people["staff"].id
    )

    assert updated.assigned_staff_id == people["staff"].id


async def test_update_status_conflict_leaves_row_untouched(repo, db_session):
    booking = await _persist(db_session, make_booking("in_progress", assigned_staff_id=uuid.uuid4()))

    with pytest.raises(ConcurrentModification):
        await repo.update_status(booking.id, "assigned", "in_progress")

    assert (await repo.fetch_booking(booking.id)).status == "in_progress"


async def test_update_status_unknown_booking(repo):
    with pytest.raises(BookingNotFound):
        await repo.update_status(uuid.uuid4(), "pending", "confirmed")


async def test_second_write_from_same_observation_conflicts(repo, db_session):
    booking = await _persist(db_session, make_booking("assigned", assigned_staff_id=uuid.uuid4()))

    await repo.update_status(booking.id, "assigned", "in_progress")
    with pytest.raises(ConcurrentModification):
        await repo.update_status(booking.id, "assigned", "cancelled")

    assert (await repo.fetch_booking(booking.id)).status == "in_progress"


async def test_visibility_by_role(repo, db_session, people):
    staff, other, customer = people["staff"], people["other_staff"], people["customer"]
    mine = await _persist(
        db_session,
        make_booking("assigned", assigned_staff_id=staff.id, customer_id=customer.id),
    )
    await _persist(db_session, make_booking("assigned", assigned_staff_id=other.id))
    await _persist(db_session, make_booking("pending"))

    staff_view = await repo.fetch_bookings_visible_to(Actor.from_user(staff))
    customer_view = await repo.fetch_bookings_visible_to(Actor.from_user(customer))
    admin_view = await repo.fetch_bookings_visible_to(Actor.from_user(people["admin"]))

    assert [b.id for b in staff_view] == [mine.id]
    assert [b.id for b in customer_view] == [mine.id]
    assert len(admin_view) == 3


async def test_visible_bookings_ordered_by_schedule(repo, db_session, people):
    staff = people["staff"]
    late = await _persist(
        db_session,
        make_booking("assigned", assigned_staff_id=staff.id, scheduled_date=date(2026, 10, 22)),
    )
    early_afternoon = await _persist(
        db_session,
        make_booking(
            "in_progress",
            assigned_staff_id=staff.id,
            scheduled_date=date(2026, 10, 21),
            scheduled_time="14:00",
        ),
    )
    early_morning = await _persist(
        db_session,
        make_booking(
            "completed",
            assigned_staff_id=staff.id,
            scheduled_date=date(2026, 10, 21),
            scheduled_time="09:00",
        ),
    )

    bookings = await repo.fetch_bookings_visible_to(Actor.from_user(staff))

    assert [b.id for b in bookings] == [early_morning.id, early_afternoon.id, late.id]


async def test_lifecycle_service_over_sql_store(repo, db_session, people):
    staff_actor = Actor.from_user(people["staff"])
    admin_actor = Actor.from_user(people["admin"])
    booking = await _persist(db_session, make_booking("pending"))
    service = BookingLifecycleService(repo)

    await service.request_transition(booking.id, "confirmed", admin_actor)
    await service.request_transition(
        booking.id, "assigned", admin_actor, assigned_staff_id=staff_actor.id
    )
    started = await service.request_transition(booking.id, "in_progress", staff_actor)

    assert started.status == "in_progress"
    assert started.assigned_staff_id == staff_actor.id
    assert started.started_at is not None

    projection = await service.staff_jobs(staff_actor)
    assert [b.id for b in projection.active_jobs] == [booking.id]


async def test_audit_status_history(db_session, people):
    booking = await _persist(db_session, make_booking("pending"))
    admin = people["admin"]

    await audit_service.log_status_change(
        db_session, admin.id, booking.id, "pending", "confirmed", "admin"
    )
    await db_session.flush()

    history = await audit_service.status_history(db_session, booking.id)

    assert len(history) == 1
    assert history[0].old_values == {"status": "pending"}
    assert history[0].new_values == {"status": "confirmed"}
    assert history[0].actor_role == "admin"


async def test_audit_rows_are_append_only(db_session, people):
    register_immutability_enforcement()
    entry = await audit_service.log_status_change(
        db_session, people["admin"].id, uuid.uuid4(), "pending", "cancelled", "admin"
    )
    await db_session.flush()

    entry.new_values = {"status": "confirmed"}
    with pytest.raises(ImmutabilityViolationError):
        await db_session.flush()


async def test_new_booking_starts_in_initial_status(repo, db_session):
    booking = Booking(
        booking_number="HR-NEW001",
        customer_name="Amina Khan",
        address_line1="12 Marina Walk",
        city="Dubai",
        scheduled_date=date(2026, 10, 20),
        scheduled_time="10:00",
    )
    await _persist(db_session, booking)

    loaded = await repo.fetch_booking(booking.id)

    assert loaded.status == INITIAL_STATUS.value == "pending"


class TestDbContext:
    """Session context used by the management scripts"""

    @pytest.fixture
    def bound_sessions(self, db_engine, monkeypatch):
        session_maker = async_sessionmaker(db_engine, expire_on_commit=False)
        monkeypatch.setattr(database, "AsyncSessionLocal", session_maker)
        return session_maker

    async def test_commits_on_success(self, bound_sessions):
        async with database.get_db_context() as session:
            session.add(User(email="new@handrest.com", password_hash="x", role="staff"))

        async with bound_sessions() as check:
            result = await check.execute(select(User).where(User.email == "new@handrest.com"))
            assert result.scalar_one_or_none() is not None

    async def test_rolls_back_on_error(self, bound_sessions):
        with pytest.raises(RuntimeError):
            async with database.get_db_context() as session:
                session.add(User(email="gone@handrest.com", password_hash="x", role="staff"))
                await session.flush()
                raise RuntimeError("boom")

        async with bound_sessions() as check:
            result = await check.execute(select(User).where(User.email == "gone@handrest.com"))
            assert result.scalar_one_or_none() is None
