"""
Booking service orchestrator.

Drives the job lifecycle: request, accept/decline, check-in, completion,
cancellation and task progress. Every transition is a single guarded
UPDATE through JobCRUD; when the guard misses, the job is re-read only to
decide which error to raise.

Dependencies: backend.boundary.db.CRUD, backend.boundary.notifications, backend.configs
System role: Job Lifecycle Manager
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Iterable, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from backend.application.services.unit_of_work import unit_of_work
from backend.boundary.db.CRUD.job_crud import job_crud
from backend.boundary.db.models.job_model import JobModel
from backend.boundary.db.models.payment_model import PaymentMethod
from backend.boundary.notifications import (
    LoggingNotificationDispatcher,
    NotificationDispatcher,
    NotificationEvent,
    dispatch_safely,
)
from backend.configs import PaymentSettings, get_settings
from backend.core.booking_state import (
    TASK_EDITABLE_STATUSES,
    JobPaymentStatus,
    JobStatus,
    hours_between,
    progress_percentage,
    utcnow,
)
from backend.core.commission import MAX_HOURLY_RATE, check_hours, to_decimal
from backend.core.exceptions import (
    ConflictError,
    NotFoundError,
    PreconditionError,
    ValidationError,
)
from backend.models.actor import Actor, UserRole

logger = logging.getLogger(__name__)


def _job_payload(job: JobModel, **extra: Any) -> dict[str, Any]:
    return {"job_id": str(job.id), "job_title": job.title, **extra}


class BookingService:
    """Job lifecycle orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        dispatcher: NotificationDispatcher | None = None,
        settings: PaymentSettings | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """
        Initialize booking service.

        Args:
            db: Async SQLAlchemy session
            dispatcher: Notice delivery (defaults to logging only)
            settings: Payment settings; completion policy is read from here
            clock: Source of the current time
        """
        self.db = db
        self.dispatcher = dispatcher or LoggingNotificationDispatcher()
        self.settings = settings or get_settings().payments
        self.clock = clock

    async def create_booking(
        self,
        homeowner_id: UUID,
        maid_id: UUID | None,
        title: str,
        address: str,
        scheduled_datetime: datetime,
        hourly_rate: Decimal | float | int | None,
        estimated_duration: float | None = None,
        description: str | None = None,
        tasks: Iterable[str] | None = None,
        payment_method: PaymentMethod = PaymentMethod.CASH,
    ) -> JobModel:
        """
        Create a booking request.

        A request without maid_id is open: any maid may claim it.

        Args:
            homeowner_id: Homeowner placing the request
            maid_id: Requested maid, or None for an open request
            title: Short job title
            address: Service address
            scheduled_datetime: When the work should happen
            hourly_rate: Agreed rate (>= 0)
            estimated_duration: Expected hours (> 0); defaults to 4.0
            description: Free-text details
            tasks: Task names, in order
            payment_method: Preferred payment method

        Returns:
            JobModel: Job in requested status with payment_status none

        Raises:
            ValidationError: Missing field, or a rate or duration that is not
                finite or out of bounds
        """
        if not title or not title.strip():
            raise ValidationError("Title is required", field="title")
        if not address or not address.strip():
            raise ValidationError("Address is required", field="address")
        if scheduled_datetime is None:
            raise ValidationError(
                "Scheduled date and time is required", field="scheduled_datetime"
            )
        if hourly_rate is None:
            raise ValidationError("Hourly rate is required", field="hourly_rate")
        rate = to_decimal(hourly_rate, "hourly_rate")
        if rate < 0:
            raise ValidationError("Hourly rate must be non-negative", field="hourly_rate")
        if rate > MAX_HOURLY_RATE:
            raise ValidationError(
                f"Hourly rate cannot exceed {MAX_HOURLY_RATE}", field="hourly_rate"
            )
        if estimated_duration is not None:
            estimated_duration = check_hours(estimated_duration, "estimated_duration")

        task_list = [
            {"name": name, "completed": False, "completed_at": None, "notes": ""}
            for name in (tasks or [])
        ]

        async with unit_of_work(
            self.db, logger, "Create booking", homeowner_id=homeowner_id, maid_id=maid_id
        ):
            job = await job_crud.create(
                self.db,
                homeowner_id=homeowner_id,
                maid_id=maid_id,
                title=title.strip(),
                description=description,
                address=address.strip(),
                scheduled_datetime=scheduled_datetime,
                hourly_rate=rate,
                estimated_duration=estimated_duration or 4.0,
                payment_method=payment_method,
                tasks=task_list,
                progress_percentage=0,
            )

        logger.info(
            "Booking requested",
            extra={"job_id": str(job.id), "homeowner_id": str(homeowner_id)},
        )
        await dispatch_safely(
            self.dispatcher,
            NotificationEvent.JOB_REQUEST,
            maid_id,
            _job_payload(job, homeowner_id=str(homeowner_id)),
        )
        return job

    async def accept_booking(self, maid_id: UUID, job_id: UUID) -> JobModel:
        """
        Accept a pending request addressed to this maid, or an open request.

        Raises:
            NotFoundError: No pending request matches this maid and job
        """
        async with unit_of_work(
            self.db, logger, "Accept booking", job_id=job_id, maid_id=maid_id
        ):
            job = await job_crud.claim_request(self.db, job_id, maid_id)
            if job is None:
                raise NotFoundError(
                    "job", str(job_id), message="No pending request found for this maid"
                )

        logger.info("Booking accepted", extra={"job_id": str(job_id), "maid_id": str(maid_id)})
        await dispatch_safely(
            self.dispatcher,
            NotificationEvent.JOB_ACCEPTED,
            job.homeowner_id,
            _job_payload(job, maid_id=str(maid_id)),
        )
        return job

    async def decline_booking(self, maid_id: UUID, job_id: UUID) -> JobModel:
        """
        Decline a pending request addressed to this maid.

        Raises:
            NotFoundError: No pending request matches this maid and job
        """
        async with unit_of_work(
            self.db, logger, "Decline booking", job_id=job_id, maid_id=maid_id
        ):
            job = await job_crud.decline_request(self.db, job_id, maid_id, self.clock())
            if job is None:
                raise NotFoundError(
                    "job", str(job_id), message="No pending request found for this maid"
                )

        logger.info("Booking declined", extra={"job_id": str(job_id), "maid_id": str(maid_id)})
        await dispatch_safely(
            self.dispatcher,
            NotificationEvent.JOB_DECLINED,
            job.homeowner_id,
            _job_payload(job),
        )
        return job

    async def check_in(self, maid_id: UUID, job_id: UUID) -> JobModel:
        """
        Start work on an accepted job.

        Raises:
            NotFoundError: Job missing or assigned to another maid
            PreconditionError: Job is not accepted
        """
        async with unit_of_work(self.db, logger, "Check in", job_id=job_id, maid_id=maid_id):
            job = await job_crud.start(self.db, job_id, maid_id, self.clock())
            if job is None:
                current = await self._get_assigned(job_id, maid_id)
                raise PreconditionError(
                    "Job must be accepted before check-in",
                    current_status=current.status.value,
                )

        logger.info("Maid checked in", extra={"job_id": str(job_id), "maid_id": str(maid_id)})
        await dispatch_safely(
            self.dispatcher,
            NotificationEvent.JOB_STARTED,
            job.homeowner_id,
            _job_payload(job),
        )
        return job

    async def complete_job(
        self,
        job_id: UUID,
        actual_duration: float | None = None,
        maid_id: UUID | None = None,
    ) -> JobModel:
        """
        Finish an in-progress job.

        Args:
            job_id: Job UUID
            actual_duration: Worked hours; derived from started_at when omitted
            maid_id: When given, only this maid may complete the job

        Returns:
            JobModel: Completed job with progress 100

        Raises:
            NotFoundError: Job missing or assigned to another maid
            ValidationError: Duration missing, not finite or out of bounds
            PreconditionError: Job not in progress, or duration already recorded
        """
        async with unit_of_work(self.db, logger, "Complete job", job_id=job_id):
            current = await self._get_assigned(job_id, maid_id)
            now = self.clock()

            if actual_duration is None:
                if current.started_at is None:
                    raise ValidationError(
                        "Actual duration is required", field="actual_duration"
                    )
                actual_duration = hours_between(current.started_at, now)
            actual_duration = check_hours(actual_duration, "actual_duration")

            payment_status = None
            if self.settings.mark_awaiting_payment_on_completion:
                payment_status = JobPaymentStatus.AWAITING_PAYMENT

            job = await job_crud.complete(
                self.db,
                job_id,
                actual_duration=actual_duration,
                completed_at=now,
                maid_id=maid_id,
                payment_status=payment_status,
            )
            if job is None:
                raise PreconditionError(
                    "Only in-progress jobs can be completed",
                    current_status=current.status.value,
                )

        logger.info(
            "Job completed",
            extra={"job_id": str(job_id), "actual_duration": actual_duration},
        )
        await dispatch_safely(
            self.dispatcher,
            NotificationEvent.JOB_COMPLETED,
            job.homeowner_id,
            _job_payload(job),
        )
        return job

    async def cancel_booking(self, actor_id: UUID, job_id: UUID) -> JobModel:
        """
        Cancel a booking that has not started.

        Either counterparty may cancel while the job is requested or
        accepted. Once work has started the booking can only be completed.

        Raises:
            NotFoundError: Job missing or the actor is not a party to it
            PreconditionError: Job already started, completed or cancelled
        """
        async with unit_of_work(
            self.db, logger, "Cancel booking", job_id=job_id, actor_id=actor_id
        ):
            job = await job_crud.cancel(self.db, job_id, actor_id, self.clock())
            if job is None:
                current = await job_crud.get_by_id(self.db, job_id)
                if current is None or actor_id not in (current.homeowner_id, current.maid_id):
                    raise NotFoundError("job", str(job_id))
                raise PreconditionError(
                    "Only requested or accepted bookings can be cancelled",
                    current_status=current.status.value,
                )

        if actor_id == job.homeowner_id:
            recipient, cancelled_by = job.maid_id, "homeowner"
        else:
            recipient, cancelled_by = job.homeowner_id, "maid"

        logger.info(
            "Booking cancelled",
            extra={"job_id": str(job_id), "cancelled_by": cancelled_by},
        )
        await dispatch_safely(
            self.dispatcher,
            NotificationEvent.JOB_CANCELLED,
            recipient,
            _job_payload(job, cancelled_by=cancelled_by),
        )
        return job

    async def update_task_progress(
        self,
        job_id: UUID,
        task_updates: Iterable[dict[str, Any]],
        maid_id: UUID | None = None,
    ) -> JobModel:
        """
        Apply task updates and recompute progress.

        Each update is {"index": int, "completed": bool?, "notes": str?}.
        The write is conditional on the job version read here, so two
        concurrent editors cannot overwrite each other.

        Args:
            job_id: Job UUID
            task_updates: Updates addressed by task index
            maid_id: When given, only this maid may edit tasks

        Returns:
            JobModel: Job with new tasks and progress; status unchanged

        Raises:
            NotFoundError: Job missing or assigned to another maid
            PreconditionError: Job is not accepted or in progress
            ValidationError: Task index out of range
            ConflictError: Task list changed since it was read
        """
        async with unit_of_work(self.db, logger, "Update task progress", job_id=job_id):
            current = await self._get_assigned(job_id, maid_id)
            if current.status not in TASK_EDITABLE_STATUSES:
                raise PreconditionError(
                    "Tasks can only be updated on accepted or in-progress jobs",
                    current_status=current.status.value,
                )

            now = self.clock()
            tasks = [dict(task) for task in (current.tasks or [])]
            for update in task_updates:
                index = update.get("index")
                if not isinstance(index, int) or not 0 <= index < len(tasks):
                    raise ValidationError(f"Task index {index} out of range", field="index")
                task = tasks[index]
                if update.get("completed") is not None:
                    task["completed"] = bool(update["completed"])
                    task["completed_at"] = now.isoformat() if task["completed"] else None
                if update.get("notes") is not None:
                    task["notes"] = update["notes"]

            progress = progress_percentage(tasks)
            job = await job_crud.replace_tasks(
                self.db,
                job_id,
                expected_version=current.version,
                tasks=tasks,
                progress_percentage=progress,
                statuses=TASK_EDITABLE_STATUSES,
            )
            if job is None:
                raise ConflictError(
                    "Task list changed concurrently, reload and retry",
                    details={"job_id": str(job_id)},
                )

        await dispatch_safely(
            self.dispatcher,
            NotificationEvent.JOB_PROGRESS,
            job.homeowner_id,
            _job_payload(job, progress_percentage=progress),
        )
        return job

    async def get_job(self, actor: Actor, job_id: UUID) -> JobModel:
        """
        Read one job as seen by the actor.

        Raises:
            NotFoundError: Job missing or not visible to the actor
        """
        job = await job_crud.get_by_id(self.db, job_id)
        if job is None or not self._can_view(actor, job):
            raise NotFoundError("job", str(job_id))
        return job

    async def list_jobs(
        self,
        actor: Actor,
        status: JobStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Sequence[JobModel]:
        """Jobs visible to the actor, newest schedule first."""
        statuses = [status] if status is not None else None
        if actor.role == UserRole.HOMEOWNER:
            return await job_crud.list_for_homeowner(
                self.db, actor.id, statuses=statuses, limit=limit, offset=offset
            )
        if actor.role == UserRole.MAID:
            return await job_crud.list_for_maid(
                self.db, actor.id, statuses=statuses, limit=limit, offset=offset
            )

        conditions = [JobModel.status == status] if status is not None else []
        return await job_crud.list_where(
            self.db,
            *conditions,
            order_by=(JobModel.scheduled_datetime.desc(),),
            limit=limit,
            offset=offset,
        )

    async def _get_assigned(self, job_id: UUID, maid_id: UUID | None) -> JobModel:
        job = await job_crud.get_by_id(self.db, job_id)
        if job is None or (maid_id is not None and job.maid_id != maid_id):
            raise NotFoundError("job", str(job_id))
        return job

    @staticmethod
    def _can_view(actor: Actor, job: JobModel) -> bool:
        if actor.is_admin:
            return True
        if actor.role == UserRole.HOMEOWNER:
            return job.homeowner_id == actor.id
        return job.maid_id == actor.id
