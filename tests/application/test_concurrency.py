"""
Test suite for racing requests on one booking.

Each side gets its own session on a file-backed database, so they see
each other only through committed rows. Both sides read the booking before
either writes; the guarded update then picks exactly one winner.

System role: Verification of single-winner transitions across sessions
"""

import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker

from backend.application.services.booking_service import BookingService
from backend.application.services.payment_service import PaymentService
from backend.boundary.db.CRUD.job_crud import job_crud
from backend.boundary.db.CRUD.payment_crud import payment_crud
from backend.boundary.db.models.job_model import JobModel
from backend.boundary.db.models.payment_model import PaymentMethod, PaymentModel
from backend.configs import PaymentSettings
from backend.core.booking_state import JobPaymentStatus, JobStatus
from backend.core.exceptions import ConflictError, NotFoundError
from tests.conftest import create_job


def snapshot_job(job: JobModel) -> SimpleNamespace:
    """Detached copy of a job row as one request observed it."""
    return SimpleNamespace(
        **{column.key: getattr(job, column.key) for column in JobModel.__table__.columns}
    )


async def process_with_stale_read(
    service: PaymentService, snapshot: SimpleNamespace, homeowner_id: uuid.UUID
):
    """Run process_payment with its ownership read pinned to an earlier snapshot."""

    async def stale_lookup(job_id: uuid.UUID, requester_id: uuid.UUID) -> SimpleNamespace:
        return snapshot

    service._get_owned_job = stale_lookup
    return await service.process_payment(snapshot.id, homeowner_id, PaymentMethod.CARD)


class TestSingleWinner:
    """Test suite for concurrent transitions on the same job."""

    async def test_two_maids_accepting_open_request_should_yield_one_winner(
        self,
        file_session_factory: async_sessionmaker,
        homeowner_id: uuid.UUID,
        maid_id: uuid.UUID,
        other_maid_id: uuid.UUID,
        payment_settings: PaymentSettings,
        clock,
    ) -> None:
        # Arrange
        async with file_session_factory() as setup:
            job = await create_job(setup, homeowner_id, None, JobStatus.REQUESTED)
            job_id = job.id

        async with file_session_factory() as first, file_session_factory() as second:
            first_service = BookingService(first, AsyncMock(), payment_settings, clock)
            second_service = BookingService(second, AsyncMock(), payment_settings, clock)
            assert (await job_crud.get_by_id(first, job_id)).status == JobStatus.REQUESTED
            assert (await job_crud.get_by_id(second, job_id)).status == JobStatus.REQUESTED

            # Act
            accepted = await first_service.accept_booking(maid_id, job_id)
            with pytest.raises(NotFoundError):
                await second_service.accept_booking(other_maid_id, job_id)

        # Assert
        assert accepted.maid_id == maid_id
        async with file_session_factory() as check:
            stored = await job_crud.get_by_id(check, job_id)
            assert stored.status == JobStatus.ACCEPTED
            assert stored.maid_id == maid_id

    async def test_double_settlement_should_create_one_payment(
        self,
        file_session_factory: async_sessionmaker,
        homeowner_id: uuid.UUID,
        maid_id: uuid.UUID,
        payment_settings: PaymentSettings,
        clock,
    ) -> None:
        """Test the loser of the payment claim gets a conflict and writes nothing."""
        # Arrange
        async with file_session_factory() as setup:
            job = await create_job(setup, homeowner_id, maid_id, JobStatus.COMPLETED)
            job_id = job.id

        async with file_session_factory() as first, file_session_factory() as second:
            first_service = PaymentService(first, AsyncMock(), payment_settings, clock)
            second_service = PaymentService(second, AsyncMock(), payment_settings, clock)
            snapshot = snapshot_job(await job_crud.get_by_id(second, job_id))
            assert snapshot.payment_status == JobPaymentStatus.NONE

            # Act
            winner = await first_service.process_payment(
                job_id, homeowner_id, PaymentMethod.CARD
            )
            with pytest.raises(ConflictError):
                await process_with_stale_read(second_service, snapshot, homeowner_id)

        # Assert
        assert winner.already_paid is False
        async with file_session_factory() as check:
            count = await payment_crud.count_where(
                check, PaymentModel.booking_id == job_id
            )
            assert count == 1
