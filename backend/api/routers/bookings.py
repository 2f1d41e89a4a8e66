"""
Booking API endpoints.

Routes:
- POST /bookings - Request a booking (homeowner)
- GET /bookings - List bookings visible to the caller
- GET /bookings/{id} - Get single booking
- POST /bookings/{id}/accept - Accept request (maid)
- POST /bookings/{id}/decline - Decline request (maid)
- POST /bookings/{id}/check-in - Start work (maid)
- POST /bookings/{id}/complete - Finish work (maid, admin)
- POST /bookings/{id}/cancel - Cancel before work starts (homeowner, maid)
- PATCH /bookings/{id}/tasks - Update task progress (maid)

Dependencies: backend.application.services, backend.models
System role: Booking lifecycle HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from backend.api.deps.dependencies import (
    get_actor,
    get_booking_service,
    require_roles,
)
from backend.api.routers.router_utils import handle_domain_errors
from backend.application.services.booking_service import BookingService
from backend.core.booking_state import JobStatus
from backend.models.actor import Actor, UserRole
from backend.models.booking import (
    CompleteJobRequest,
    CreateBookingRequest,
    JobResponse,
    UpdateTasksRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("", response_model=JobResponse, status_code=201)
@handle_domain_errors
async def create_booking(
    request: CreateBookingRequest,
    actor: Actor = Depends(require_roles(UserRole.HOMEOWNER)),
    booking_service: BookingService = Depends(get_booking_service),
) -> JobResponse:
    """
    Request a booking.

    Args:
        request: CreateBookingRequest; omit maid_id for an open request
        actor: Calling homeowner
        booking_service: Injected BookingService

    Returns:
        JobResponse: Job in requested status

    Raises:
        HTTPException(400): Invalid booking data
    """
    job = await booking_service.create_booking(
        homeowner_id=actor.id,
        maid_id=request.maid_id,
        title=request.title,
        address=request.address,
        scheduled_datetime=request.scheduled_datetime,
        hourly_rate=request.hourly_rate,
        estimated_duration=request.estimated_duration,
        description=request.description,
        tasks=request.tasks,
        payment_method=request.payment_method,
    )
    return JobResponse.model_validate(job)


@router.get("", response_model=list[JobResponse])
@handle_domain_errors
async def list_bookings(
    status: JobStatus | None = Query(None, description="Filter by status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    actor: Actor = Depends(get_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> list[JobResponse]:
    """List bookings visible to the caller, newest schedule first."""
    jobs = await booking_service.list_jobs(actor, status=status, limit=limit, offset=offset)
    return [JobResponse.model_validate(job) for job in jobs]


@router.get("/{job_id}", response_model=JobResponse)
@handle_domain_errors
async def get_booking(
    job_id: UUID,
    actor: Actor = Depends(get_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> JobResponse:
    """Get one booking; 404 when it does not exist or belongs to someone else."""
    return JobResponse.model_validate(await booking_service.get_job(actor, job_id))


@router.post("/{job_id}/accept", response_model=JobResponse)
@handle_domain_errors
async def accept_booking(
    job_id: UUID,
    actor: Actor = Depends(require_roles(UserRole.MAID)),
    booking_service: BookingService = Depends(get_booking_service),
) -> JobResponse:
    """
    Accept a pending request.

    Raises:
        HTTPException(404): No pending request for this maid
    """
    job = await booking_service.accept_booking(actor.id, job_id)
    return JobResponse.model_validate(job)


@router.post("/{job_id}/decline", response_model=JobResponse)
@handle_domain_errors
async def decline_booking(
    job_id: UUID,
    actor: Actor = Depends(require_roles(UserRole.MAID)),
    booking_service: BookingService = Depends(get_booking_service),
) -> JobResponse:
    """Decline a pending request addressed to the calling maid."""
    job = await booking_service.decline_booking(actor.id, job_id)
    return JobResponse.model_validate(job)


@router.post("/{job_id}/check-in", response_model=JobResponse)
@handle_domain_errors
async def check_in(
    job_id: UUID,
    actor: Actor = Depends(require_roles(UserRole.MAID)),
    booking_service: BookingService = Depends(get_booking_service),
) -> JobResponse:
    """Start work on an accepted booking."""
    job = await booking_service.check_in(actor.id, job_id)
    return JobResponse.model_validate(job)


@router.post("/{job_id}/complete", response_model=JobResponse)
@handle_domain_errors
async def complete_booking(
    job_id: UUID,
    request: CompleteJobRequest,
    actor: Actor = Depends(require_roles(UserRole.MAID, UserRole.ADMIN)),
    booking_service: BookingService = Depends(get_booking_service),
) -> JobResponse:
    """
    Finish an in-progress booking.

    Maids may only complete their own jobs; admins may complete any.
    """
    job = await booking_service.complete_job(
        job_id,
        actual_duration=request.actual_duration,
        maid_id=None if actor.is_admin else actor.id,
    )
    return JobResponse.model_validate(job)


@router.post("/{job_id}/cancel", response_model=JobResponse)
@handle_domain_errors
async def cancel_booking(
    job_id: UUID,
    actor: Actor = Depends(require_roles(UserRole.HOMEOWNER, UserRole.MAID)),
    booking_service: BookingService = Depends(get_booking_service),
) -> JobResponse:
    """
    Cancel a requested or accepted booking.

    Raises:
        HTTPException(400): Work already started or booking closed
        HTTPException(404): Booking not found for this caller
    """
    job = await booking_service.cancel_booking(actor.id, job_id)
    logger.info("Booking cancelled via API", extra={"job_id": str(job_id)})
    return JobResponse.model_validate(job)


@router.patch("/{job_id}/tasks", response_model=JobResponse)
@handle_domain_errors
async def update_tasks(
    job_id: UUID,
    request: UpdateTasksRequest,
    actor: Actor = Depends(require_roles(UserRole.MAID)),
    booking_service: BookingService = Depends(get_booking_service),
) -> JobResponse:
    """
    Update task completion and notes.

    Raises:
        HTTPException(409): Tasks changed concurrently; reload and retry
    """
    job = await booking_service.update_task_progress(
        job_id,
        [update.model_dump(exclude_unset=True) for update in request.updates],
        maid_id=actor.id,
    )
    return JobResponse.model_validate(job)
