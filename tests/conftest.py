"""
Pytest configuration and shared fixtures
"""
import asyncio
import os
import uuid
from datetime import date
from typing import Any

# Settings are read at import time; point them at test values first
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-minimum-32-chars-long-for-security")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core.exceptions import BookingNotFound, ConcurrentModification
from app.database import Base
from app.domain.actor import Actor, UserRole
from app.models.booking import Booking
from app.repositories.base import BookingStore


def snapshot(booking: Booking) -> Booking:
    """Detached copy of a booking's column values."""
    return Booking(**{c.key: getattr(booking, c.key) for c in Booking.__table__.columns})


class InMemoryBookingStore(BookingStore):
    """BookingStore fake that hands out snapshots, like a database would."""

    def __init__(self, bookings: list[Booking] | None = None):
        self.rows: dict[uuid.UUID, Booking] = {}
        self.writes = 0
        for booking in bookings or []:
            self.add(booking)

    def add(self, booking: Booking) -> Booking:
        self.rows[booking.id] = booking
        return booking

    async def fetch_booking(self, booking_id):
        row = self.rows.get(booking_id)
        if row is None:
            raise BookingNotFound(booking_id)
        copy = snapshot(row)
        # Yield so concurrent callers can read before anyone writes
        await asyncio.sleep(0)
        return copy

    async def fetch_bookings_visible_to(self, actor: Actor) -> list[Booking]:
        rows = list(self.rows.values())
        if actor.role is UserRole.STAFF:
            rows = [b for b in rows if b.assigned_staff_id == actor.id]
        elif actor.role is UserRole.CUSTOMER:
            rows = [b for b in rows if b.customer_id == actor.id]
        return [snapshot(b) for b in rows]

    async def update_status(self, booking_id, expected_status, new_status, **changes: Any):
        await asyncio.sleep(0)
        # No awaits below: compare and write happen atomically
        row = self.rows.get(booking_id)
        if row is None:
            raise BookingNotFound(booking_id)
        if row.status != expected_status:
            raise ConcurrentModification(booking_id, expected_status)
        row.status = new_status
        for key, value in changes.items():
            setattr(row, key, value)
        self.writes += 1
        return snapshot(row)


def make_booking(status: str = "pending", **overrides: Any) -> Booking:
    """Build a transient booking with display fields filled in."""
    values: dict[str, Any] = {
        "id": uuid.uuid4(),
        "booking_number": f"HR-{uuid.uuid4().hex[:6].upper()}",
        "customer_id": None,
        "package_name": "Standard Home Clean",
        "customer_name": "Amina Khan",
        "customer_phone": "+971500000001",
        "address_line1": "12 Marina Walk",
        "city": "Dubai",
        "notes": None,
        "scheduled_date": date(2026, 10, 20),
        "scheduled_time": "10:00",
        "status": status,
        "assigned_staff_id": None,
        "cancelled_by": None,
        "confirmed_at": None,
        "assigned_at": None,
        "started_at": None,
        "completed_at": None,
        "cancelled_at": None,
    }
    values.update(overrides)
    return Booking(**values)


@pytest.fixture
def staff_actor():
    """Fixture providing a staff identity"""
    return Actor(id=uuid.uuid4(), role=UserRole.STAFF)


@pytest.fixture
def admin_actor():
    """Fixture providing an admin identity"""
    return Actor(id=uuid.uuid4(), role=UserRole.ADMIN)


@pytest.fixture
def customer_actor():
    """Fixture providing a customer identity"""
    return Actor(id=uuid.uuid4(), role=UserRole.CUSTOMER)


@pytest.fixture
def store():
    """Fixture providing an empty in-memory booking store"""
    return InMemoryBookingStore()


@pytest.fixture
async def db_engine():
    """Fixture providing a fresh in-memory SQLite schema"""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine):
    """Fixture providing a session on the in-memory schema"""
    session_maker = async_sessionmaker(db_engine, expire_on_commit=False)
    async with session_maker() as session:
        yield session


@pytest.fixture
def fastapi_app():
    """Fixture providing the application with dependency overrides cleared after use"""
    from app.main import app

    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(fastapi_app):
    """Fixture providing an async HTTP client bound to the app"""
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
