"""
Booking domain models and schemas.

Request/response schemas for the job lifecycle.

Dependencies: pydantic
System role: Booking API contracts
"""

from pydantic import BaseModel, ConfigDict, Field
import uuid
from datetime import datetime
from decimal import Decimal

from backend.boundary.db.models.payment_model import PaymentMethod
from backend.core.booking_state import JobPaymentStatus, JobStatus
from backend.core.commission import MAX_DURATION_HOURS, MAX_HOURLY_RATE


class CreateBookingRequest(BaseModel):
    """Request schema for a new booking."""

    maid_id: uuid.UUID | None = Field(
        None, description="Requested maid; omit for an open request"
    )
    title: str = Field(..., min_length=1, max_length=200, description="Job title")
    description: str | None = Field(None, max_length=4096, description="Job details")
    address: str = Field(..., min_length=1, max_length=500, description="Service address")
    scheduled_datetime: datetime = Field(description="When the work should happen")
    hourly_rate: Decimal = Field(
        ..., ge=0, le=MAX_HOURLY_RATE, decimal_places=2, description="Agreed hourly rate"
    )
    estimated_duration: float | None = Field(
        None, gt=0, le=MAX_DURATION_HOURS, allow_inf_nan=False, description="Expected hours"
    )
    tasks: list[str] = Field(default_factory=list, description="Task names, in order")
    payment_method: PaymentMethod = PaymentMethod.CASH


class CompleteJobRequest(BaseModel):
    """Request schema for completing a job."""

    actual_duration: float | None = Field(
        None,
        gt=0,
        le=MAX_DURATION_HOURS,
        allow_inf_nan=False,
        description="Worked hours; derived from check-in time when omitted",
    )


class TaskUpdate(BaseModel):
    """One task change addressed by position."""

    index: int = Field(..., ge=0)
    completed: bool | None = None
    notes: str | None = Field(None, max_length=1000)


class UpdateTasksRequest(BaseModel):
    """Request schema for task progress updates."""

    updates: list[TaskUpdate] = Field(..., min_length=1)


class TaskResponse(BaseModel):
    """Task entry on a job."""

    name: str
    completed: bool = False
    completed_at: datetime | None = None
    notes: str = ""


class JobResponse(BaseModel):
    """Response schema for a job."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    homeowner_id: uuid.UUID
    maid_id: uuid.UUID | None
    title: str
    description: str | None
    address: str
    scheduled_datetime: datetime
    status: JobStatus
    hourly_rate: Decimal
    estimated_duration: float
    actual_duration: float | None
    payment_status: JobPaymentStatus
    payment_method: PaymentMethod
    tasks: list[TaskResponse]
    progress_percentage: int
    started_at: datetime | None
    completed_at: datetime | None
    cancelled_at: datetime | None
    created_at: datetime
    updated_at: datetime
