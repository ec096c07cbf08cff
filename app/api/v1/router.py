"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import auth, bookings, staff

api_router = APIRouter()

# Authentication
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])

# Staff portal
api_router.include_router(staff.router, prefix="/staff", tags=["Staff"])
