"""Staff portal endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import get_current_actor, get_lifecycle_service
from app.core.permissions import require_job_access
from app.domain.actor import Actor
from app.schemas.booking import JobsResponse
from app.services.booking_lifecycle_service import BookingLifecycleService

router = APIRouter()


@router.get("/jobs", response_model=JobsResponse, dependencies=[Depends(require_job_access)])
async def get_jobs(
    actor: Annotated[Actor, Depends(get_current_actor)],
    service: Annotated[BookingLifecycleService, Depends(get_lifecycle_service)],
) -> JobsResponse:
    """Active and completed jobs for the signed-in staff member."""
    projection = await service.staff_jobs(actor)
    return JobsResponse.from_projection(projection, actor.role)
