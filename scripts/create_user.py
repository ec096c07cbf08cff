#!/usr/bin/env python3
"""Create (or update) a user with a properly hashed password."""

import asyncio

from sqlalchemy import select

from app.core.security import get_password_hash
from app.database import get_db_context
from app.domain.actor import UserRole
from app.models.user import User


async def create_user(
    email: str,
    password: str,
    role: UserRole = UserRole.STAFF,
    full_name: str | None = None,
    phone: str | None = None,
) -> None:
    """Create a user, or reset the password and role of an existing one."""
    async with get_db_context() as session:
        result = await session.execute(select(User).where(User.email == email))
        existing = result.scalar_one_or_none()

        if existing:
            existing.password_hash = get_password_hash(password)
            existing.role = role.value
            existing.is_active = True
            if full_name:
                existing.full_name = full_name
            if phone:
                existing.phone = phone
            print(f"Updated existing user: {email}")
        else:
            session.add(
                User(
                    email=email,
                    password_hash=get_password_hash(password),
                    role=role.value,
                    full_name=full_name,
                    phone=phone,
                    is_active=True,
                )
            )
            print(f"Created user: {email}")

        print(f"Role: {role.value}")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Create a HandRest user")
    parser.add_argument("--email", required=True, help="Login email")
    parser.add_argument("--password", required=True, help="Login password")
    parser.add_argument(
        "--role",
        default=UserRole.STAFF.value,
        choices=[r.value for r in UserRole],
        help="User role",
    )
    parser.add_argument("--full-name", default=None, help="Display name")
    parser.add_argument("--phone", default=None, help="Phone number")

    args = parser.parse_args()

    asyncio.run(
        create_user(
            email=args.email,
            password=args.password,
            role=UserRole(args.role),
            full_name=args.full_name,
            phone=args.phone,
        )
    )
