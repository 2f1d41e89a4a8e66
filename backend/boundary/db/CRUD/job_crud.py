"""
Job CRUD operations.

Provides Create and Read operations for JobModel plus one guarded update
per lifecycle transition. Each transition is a single conditional UPDATE
keyed on the expected prior status, so concurrent requests cannot both
succeed.

Dependencies: sqlalchemy, backend.boundary.db.models.job_model
System role: Booking persistence operations for the lifecycle manager
"""

from datetime import datetime
from typing import Iterable, Sequence
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.base_crud import BaseCRUD
from backend.boundary.db.models.job_model import JobModel
from backend.core.booking_state import (
    CANCELLABLE_STATUSES,
    JobPaymentStatus,
    JobStatus,
)


class JobCRUD(BaseCRUD[JobModel]):
    """
    CRUD operations for JobModel.

    Extends BaseCRUD with role-scoped listings and the guarded state
    transitions used by BookingService and PaymentService. Every transition
    method returns the updated job, or None when its guard no longer holds.
    """

    def __init__(self) -> None:
        """Initialize JobCRUD with JobModel."""
        super().__init__(JobModel)

    async def claim_request(
        self,
        session: AsyncSession,
        id: UUID,
        maid_id: UUID,
    ) -> JobModel | None:
        """
        Accept a requested job on behalf of a maid.

        Matches jobs addressed to this maid and open requests with no maid;
        the claiming maid is recorded in the same statement.

        Args:
            session: Async database session
            id: Job UUID
            maid_id: Maid user accepting the job

        Returns:
            Accepted JobModel, or None if no pending request matched
        """
        return await self.update_where(
            session,
            id,
            JobModel.status == JobStatus.REQUESTED,
            or_(JobModel.maid_id == maid_id, JobModel.maid_id.is_(None)),
            status=JobStatus.ACCEPTED,
            maid_id=maid_id,
        )

    async def decline_request(
        self,
        session: AsyncSession,
        id: UUID,
        maid_id: UUID,
        declined_at: datetime,
    ) -> JobModel | None:
        """
        Decline a requested job addressed to this maid.

        Args:
            session: Async database session
            id: Job UUID
            maid_id: Maid user declining
            declined_at: Timestamp recorded as cancelled_at

        Returns:
            Cancelled JobModel, or None if no pending request matched
        """
        return await self.update_where(
            session,
            id,
            JobModel.status == JobStatus.REQUESTED,
            JobModel.maid_id == maid_id,
            status=JobStatus.CANCELLED,
            cancelled_at=declined_at,
            cancelled_by=maid_id,
        )

    async def start(
        self,
        session: AsyncSession,
        id: UUID,
        maid_id: UUID,
        started_at: datetime,
    ) -> JobModel | None:
        """Move an accepted job to in_progress and record the start time."""
        return await self.update_where(
            session,
            id,
            JobModel.status == JobStatus.ACCEPTED,
            JobModel.maid_id == maid_id,
            status=JobStatus.IN_PROGRESS,
            started_at=started_at,
        )

    async def complete(
        self,
        session: AsyncSession,
        id: UUID,
        actual_duration: float,
        completed_at: datetime,
        maid_id: UUID | None = None,
        payment_status: JobPaymentStatus | None = None,
    ) -> JobModel | None:
        """
        Complete an in-progress job.

        actual_duration is only written while still NULL, which keeps it
        immutable once set.

        Args:
            session: Async database session
            id: Job UUID
            actual_duration: Worked hours
            completed_at: Completion timestamp
            maid_id: Optional guard restricting completion to the assigned maid
            payment_status: Optional new payment status written alongside

        Returns:
            Completed JobModel, or None if the guard did not match
        """
        conditions = [
            JobModel.status == JobStatus.IN_PROGRESS,
            JobModel.actual_duration.is_(None),
        ]
        if maid_id is not None:
            conditions.append(JobModel.maid_id == maid_id)

        values: dict = {
            "status": JobStatus.COMPLETED,
            "actual_duration": actual_duration,
            "progress_percentage": 100,
            "completed_at": completed_at,
        }
        if payment_status is not None:
            values["payment_status"] = payment_status
        return await self.update_where(session, id, *conditions, **values)

    async def cancel(
        self,
        session: AsyncSession,
        id: UUID,
        actor_id: UUID,
        cancelled_at: datetime,
    ) -> JobModel | None:
        """Cancel a not-yet-started job on behalf of either counterparty."""
        return await self.update_where(
            session,
            id,
            JobModel.status.in_(list(CANCELLABLE_STATUSES)),
            or_(JobModel.homeowner_id == actor_id, JobModel.maid_id == actor_id),
            status=JobStatus.CANCELLED,
            cancelled_at=cancelled_at,
            cancelled_by=actor_id,
        )

    async def replace_tasks(
        self,
        session: AsyncSession,
        id: UUID,
        expected_version: int,
        tasks: list[dict],
        progress_percentage: int,
        statuses: Iterable[JobStatus],
    ) -> JobModel | None:
        """
        Write a new task list if nobody else wrote since it was read.

        Args:
            session: Async database session
            id: Job UUID
            expected_version: Version observed when the tasks were read
            tasks: Full replacement task list
            progress_percentage: Recomputed progress
            statuses: Statuses in which task edits are allowed

        Returns:
            Updated JobModel, or None on a version or status mismatch
        """
        return await self.update_where(
            session,
            id,
            JobModel.version == expected_version,
            JobModel.status.in_(list(statuses)),
            tasks=tasks,
            progress_percentage=progress_percentage,
            version=JobModel.version + 1,
        )

    async def claim_payment(self, session: AsyncSession, id: UUID) -> JobModel | None:
        """
        Mark a completed job as paid unless it already is.

        Returns:
            Updated JobModel, or None if the job is not completed or already paid
        """
        return await self.update_where(
            session,
            id,
            JobModel.status == JobStatus.COMPLETED,
            JobModel.payment_status != JobPaymentStatus.PAID,
            payment_status=JobPaymentStatus.PAID,
        )

    async def reconcile_paid(
        self,
        session: AsyncSession,
        id: UUID,
        settled_at: datetime,
    ) -> JobModel | None:
        """
        Record an admin-confirmed payment on the job.

        Sets payment_status to paid and, if work is still marked in
        progress, promotes the job to completed in the same statement.
        Jobs in any other status keep their status. Cancelled jobs are
        never marked paid.

        Returns:
            Updated JobModel, or None if the job was already marked paid or
            was cancelled
        """
        job = await self.update_where(
            session,
            id,
            JobModel.status == JobStatus.IN_PROGRESS,
            status=JobStatus.COMPLETED,
            progress_percentage=100,
            completed_at=settled_at,
            payment_status=JobPaymentStatus.PAID,
        )
        if job is not None:
            return job
        return await self.update_where(
            session,
            id,
            JobModel.payment_status != JobPaymentStatus.PAID,
            JobModel.status != JobStatus.CANCELLED,
            payment_status=JobPaymentStatus.PAID,
        )

    async def list_for_homeowner(
        self,
        session: AsyncSession,
        homeowner_id: UUID,
        statuses: Iterable[JobStatus] | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[JobModel]:
        """Jobs booked by a homeowner, newest schedule first."""
        conditions = [JobModel.homeowner_id == homeowner_id]
        if statuses is not None:
            conditions.append(JobModel.status.in_(list(statuses)))
        return await self.list_where(
            session,
            *conditions,
            order_by=(JobModel.scheduled_datetime.desc(),),
            limit=limit,
            offset=offset,
        )

    async def list_for_maid(
        self,
        session: AsyncSession,
        maid_id: UUID,
        statuses: Iterable[JobStatus] | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[JobModel]:
        """Jobs assigned to a maid, newest schedule first."""
        conditions = [JobModel.maid_id == maid_id]
        if statuses is not None:
            conditions.append(JobModel.status.in_(list(statuses)))
        return await self.list_where(
            session,
            *conditions,
            order_by=(JobModel.scheduled_datetime.desc(),),
            limit=limit,
            offset=offset,
        )

    async def list_awaiting_payment(
        self,
        session: AsyncSession,
        homeowner_id: UUID,
    ) -> Sequence[JobModel]:
        """Completed jobs of a homeowner that still wait for settlement."""
        return await self.list_where(
            session,
            JobModel.homeowner_id == homeowner_id,
            JobModel.status == JobStatus.COMPLETED,
            JobModel.payment_status == JobPaymentStatus.AWAITING_PAYMENT,
            order_by=(JobModel.updated_at.desc(),),
        )


job_crud = JobCRUD()
