#!/usr/bin/env python3
"""Seed demo bookings, one per lifecycle status, for a staff member.

Bookings normally arrive from checkout; this only fills a development
database so the staff portal has something to show.
"""

import asyncio
from datetime import UTC, date, datetime, timedelta

from sqlalchemy import select

from app.database import get_db_context, init_db
from app.domain.booking_state import STATUS_TIMESTAMP_FIELDS, BookingStatus
from app.models.booking import Booking
from app.models.user import User
from app.utils.booking_number import generate_booking_number

DEMO_JOBS = [
    ("Standard Home Clean", "Amina Khan", "+971500000001", "12 Marina Walk", "Dubai"),
    ("Deep Clean", "Omar Haddad", "+971500000002", "7 Palm Street", "Dubai"),
    ("Move-out Clean", "Sara Ali", "+971500000003", "45 Corniche Road", "Abu Dhabi"),
    ("Office Clean", "Yusuf Rahman", "+971500000004", "3 Business Bay", "Dubai"),
    ("Sofa & Carpet", "Layla Noor", "+971500000005", "88 Al Wasl Road", "Dubai"),
    ("Quick Clean", "Hassan Aziz", "+971500000006", "19 Khalifa Street", "Sharjah"),
]

NEEDS_STAFF = {BookingStatus.ASSIGNED, BookingStatus.IN_PROGRESS, BookingStatus.COMPLETED}


async def seed(staff_email: str) -> None:
    await init_db()

    async with get_db_context() as session:
        result = await session.execute(select(User).where(User.email == staff_email))
        staff = result.scalar_one_or_none()
        if staff is None:
            raise SystemExit(f"No user with email {staff_email}; run create_user.py first")

        today = date.today()
        now = datetime.now(UTC)
        for offset, (status, job) in enumerate(zip(BookingStatus, DEMO_JOBS)):
            package, name, phone, address, city = job
            booking = Booking(
                booking_number=await generate_booking_number(session),
                package_name=package,
                customer_name=name,
                customer_phone=phone,
                address_line1=address,
                city=city,
                scheduled_date=today + timedelta(days=offset),
                scheduled_time=f"{9 + offset}:00",
                status=status.value,
                assigned_staff_id=staff.id if status in NEEDS_STAFF else None,
            )
            stamp = STATUS_TIMESTAMP_FIELDS.get(status)
            if stamp:
                setattr(booking, stamp, now)
            if status is BookingStatus.CANCELLED:
                booking.cancelled_by = "admin"
            session.add(booking)
            await session.flush()
            print(f"{booking.booking_number}  {status.value:<12} {package}")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Seed demo bookings")
    parser.add_argument("--staff-email", required=True, help="Staff member to assign jobs to")
    args = parser.parse_args()

    asyncio.run(seed(args.staff_email))
