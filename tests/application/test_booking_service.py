"""
Test suite for BookingService.

Runs lifecycle operations against an in-memory database with a mocked
notification dispatcher and a frozen clock.

System role: Verification of the job lifecycle manager
"""

import uuid
from datetime import timedelta
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from backend.application.services.booking_service import BookingService
from backend.boundary.db.CRUD.job_crud import job_crud
from backend.boundary.notifications import NotificationEvent
from backend.configs import PaymentSettings
from backend.core.booking_state import JobPaymentStatus, JobStatus
from backend.core.exceptions import (
    ConflictError,
    NotFoundError,
    PreconditionError,
    ValidationError,
)
from backend.models.actor import Actor, UserRole
from tests.conftest import FIXED_NOW, JobFactory

TASKS = [
    {"name": "Kitchen", "completed": False, "completed_at": None, "notes": ""},
    {"name": "Bathroom", "completed": False, "completed_at": None, "notes": ""},
    {"name": "Bedroom", "completed": False, "completed_at": None, "notes": ""},
]


@pytest.fixture
def service(
    test_async_db: AsyncSession,
    dispatcher: AsyncMock,
    payment_settings: PaymentSettings,
    clock,
) -> BookingService:
    """Provide BookingService wired to test doubles."""
    return BookingService(
        test_async_db, dispatcher=dispatcher, settings=payment_settings, clock=clock
    )


class TestCreateBooking:
    """Test suite for BookingService.create_booking()."""

    async def test_create_booking_should_store_request_and_notify_maid(
        self,
        service: BookingService,
        dispatcher: AsyncMock,
        homeowner_id: uuid.UUID,
        maid_id: uuid.UUID,
    ) -> None:
        # Act
        job = await service.create_booking(
            homeowner_id=homeowner_id,
            maid_id=maid_id,
            title="  Spring clean ",
            address="4 Elm Road",
            scheduled_datetime=FIXED_NOW + timedelta(days=2),
            hourly_rate="25.50",
            tasks=["Windows", "Floors"],
        )

        # Assert
        assert job.status == JobStatus.REQUESTED
        assert job.payment_status == JobPaymentStatus.NONE
        assert job.title == "Spring clean"
        assert job.hourly_rate == Decimal("25.50")
        assert job.estimated_duration == 4.0
        assert [task["name"] for task in job.tasks] == ["Windows", "Floors"]
        assert all(task["completed"] is False for task in job.tasks)
        dispatcher.notify.assert_awaited_once()
        event, recipient, payload = dispatcher.notify.await_args.args
        assert event == NotificationEvent.JOB_REQUEST
        assert recipient == maid_id
        assert payload["job_title"] == "Spring clean"

    async def test_create_booking_should_skip_notice_for_open_request(
        self, service: BookingService, dispatcher: AsyncMock, homeowner_id: uuid.UUID
    ) -> None:
        # Act
        job = await service.create_booking(
            homeowner_id=homeowner_id,
            maid_id=None,
            title="Move-out clean",
            address="9 Bay St",
            scheduled_datetime=FIXED_NOW,
            hourly_rate=30,
        )

        # Assert
        assert job.maid_id is None
        dispatcher.notify.assert_not_awaited()

    @pytest.mark.parametrize(
        "overrides,field",
        [
            ({"title": " "}, "title"),
            ({"address": ""}, "address"),
            ({"scheduled_datetime": None}, "scheduled_datetime"),
            ({"hourly_rate": None}, "hourly_rate"),
            ({"hourly_rate": -5}, "hourly_rate"),
            ({"estimated_duration": 0}, "estimated_duration"),
            ({"hourly_rate": float("nan")}, "hourly_rate"),
            ({"hourly_rate": "Infinity"}, "hourly_rate"),
            ({"hourly_rate": "abc"}, "hourly_rate"),
            ({"hourly_rate": "10000.01"}, "hourly_rate"),
            ({"estimated_duration": float("nan")}, "estimated_duration"),
            ({"estimated_duration": float("inf")}, "estimated_duration"),
            ({"estimated_duration": 1e30}, "estimated_duration"),
            ({"estimated_duration": "abc"}, "estimated_duration"),
        ],
    )
    async def test_create_booking_should_validate_required_fields(
        self,
        service: BookingService,
        homeowner_id: uuid.UUID,
        maid_id: uuid.UUID,
        overrides: dict,
        field: str,
    ) -> None:
        # Arrange
        values = {
            "homeowner_id": homeowner_id,
            "maid_id": maid_id,
            "title": "Clean",
            "address": "1 Main St",
            "scheduled_datetime": FIXED_NOW,
            "hourly_rate": 20,
        }
        values.update(overrides)

        # Act & Assert
        with pytest.raises(ValidationError) as exc_info:
            await service.create_booking(**values)

        assert exc_info.value.field == field


class TestAcceptAndDecline:
    """Test suite for accept_booking() and decline_booking()."""

    async def test_accept_booking_should_move_request_to_accepted(
        self,
        service: BookingService,
        make_job: JobFactory,
        dispatcher: AsyncMock,
        maid_id: uuid.UUID,
        homeowner_id: uuid.UUID,
    ) -> None:
        # Arrange
        job = await make_job(JobStatus.REQUESTED)

        # Act
        result = await service.accept_booking(maid_id, job.id)

        # Assert
        assert result.status == JobStatus.ACCEPTED
        event, recipient, _ = dispatcher.notify.await_args.args
        assert event == NotificationEvent.JOB_ACCEPTED
        assert recipient == homeowner_id

    async def test_accept_booking_should_reject_non_requested_job_and_keep_state(
        self,
        service: BookingService,
        test_async_db: AsyncSession,
        make_job: JobFactory,
        dispatcher: AsyncMock,
        maid_id: uuid.UUID,
    ) -> None:
        # Arrange
        job = await make_job(JobStatus.IN_PROGRESS)
        job_id = job.id

        # Act & Assert
        with pytest.raises(NotFoundError, match="No pending request"):
            await service.accept_booking(maid_id, job_id)

        stored = await job_crud.get_by_id(test_async_db, job_id)
        assert stored.status == JobStatus.IN_PROGRESS
        dispatcher.notify.assert_not_awaited()

    async def test_accept_booking_should_reject_maid_not_addressed(
        self, service: BookingService, make_job: JobFactory, other_maid_id: uuid.UUID
    ) -> None:
        # Arrange
        job = await make_job(JobStatus.REQUESTED)

        # Act & Assert
        with pytest.raises(NotFoundError):
            await service.accept_booking(other_maid_id, job.id)

    async def test_decline_booking_should_cancel_and_notify_homeowner(
        self,
        service: BookingService,
        make_job: JobFactory,
        dispatcher: AsyncMock,
        maid_id: uuid.UUID,
    ) -> None:
        # Arrange
        job = await make_job(JobStatus.REQUESTED)

        # Act
        result = await service.decline_booking(maid_id, job.id)

        # Assert
        assert result.status == JobStatus.CANCELLED
        assert result.cancelled_by == maid_id
        assert dispatcher.notify.await_args.args[0] == NotificationEvent.JOB_DECLINED

    async def test_decline_booking_should_reject_accepted_job(
        self, service: BookingService, make_job: JobFactory, maid_id: uuid.UUID
    ) -> None:
        # Arrange
        job = await make_job(JobStatus.ACCEPTED)

        # Act & Assert
        with pytest.raises(NotFoundError):
            await service.decline_booking(maid_id, job.id)


class TestCheckInAndComplete:
    """Test suite for check_in() and complete_job()."""

    async def test_check_in_should_start_accepted_job(
        self, service: BookingService, make_job: JobFactory, maid_id: uuid.UUID
    ) -> None:
        # Arrange
        job = await make_job(JobStatus.ACCEPTED)

        # Act
        result = await service.check_in(maid_id, job.id)

        # Assert
        assert result.status == JobStatus.IN_PROGRESS
        assert result.started_at is not None

    async def test_check_in_should_raise_precondition_for_requested_job(
        self, service: BookingService, make_job: JobFactory, maid_id: uuid.UUID
    ) -> None:
        # Arrange
        job = await make_job(JobStatus.REQUESTED)

        # Act & Assert
        with pytest.raises(PreconditionError) as exc_info:
            await service.check_in(maid_id, job.id)

        assert exc_info.value.current_status == "requested"

    async def test_check_in_should_hide_job_of_other_maid(
        self, service: BookingService, make_job: JobFactory, other_maid_id: uuid.UUID
    ) -> None:
        # Arrange
        job = await make_job(JobStatus.ACCEPTED)

        # Act & Assert
        with pytest.raises(NotFoundError):
            await service.check_in(other_maid_id, job.id)

    async def test_complete_job_should_record_given_duration(
        self,
        service: BookingService,
        make_job: JobFactory,
        dispatcher: AsyncMock,
        maid_id: uuid.UUID,
    ) -> None:
        # Arrange
        job = await make_job(JobStatus.IN_PROGRESS)

        # Act
        result = await service.complete_job(job.id, actual_duration=2.5, maid_id=maid_id)

        # Assert
        assert result.status == JobStatus.COMPLETED
        assert result.actual_duration == 2.5
        assert result.progress_percentage == 100
        assert result.payment_status == JobPaymentStatus.NONE
        assert dispatcher.notify.await_args.args[0] == NotificationEvent.JOB_COMPLETED

    async def test_complete_job_should_derive_duration_from_check_in(
        self, service: BookingService, make_job: JobFactory
    ) -> None:
        """Test omitted duration is measured from started_at to now."""
        # Arrange
        job = await make_job(JobStatus.IN_PROGRESS)

        # Act
        result = await service.complete_job(job.id)

        # Assert
        assert result.actual_duration == 3.0

    async def test_complete_job_should_mark_awaiting_payment_when_configured(
        self,
        test_async_db: AsyncSession,
        dispatcher: AsyncMock,
        payment_settings: PaymentSettings,
        clock,
        make_job: JobFactory,
    ) -> None:
        # Arrange
        settings = payment_settings.model_copy(
            update={"mark_awaiting_payment_on_completion": True}
        )
        service = BookingService(test_async_db, dispatcher, settings, clock)
        job = await make_job(JobStatus.IN_PROGRESS)

        # Act
        result = await service.complete_job(job.id, actual_duration=1.0)

        # Assert
        assert result.payment_status == JobPaymentStatus.AWAITING_PAYMENT

    async def test_complete_job_should_reject_non_positive_duration(
        self, service: BookingService, make_job: JobFactory
    ) -> None:
        # Arrange
        job = await make_job(JobStatus.IN_PROGRESS)

        # Act & Assert
        with pytest.raises(ValidationError):
            await service.complete_job(job.id, actual_duration=0)

    @pytest.mark.parametrize("duration", [float("nan"), float("inf"), 1e30, 168.5])
    async def test_complete_job_should_reject_unbounded_duration(
        self,
        service: BookingService,
        test_async_db: AsyncSession,
        make_job: JobFactory,
        duration: float,
    ) -> None:
        """Test a duration that cannot be billed leaves the job in progress."""
        # Arrange
        job = await make_job(JobStatus.IN_PROGRESS)
        job_id = job.id

        # Act & Assert
        with pytest.raises(ValidationError) as exc_info:
            await service.complete_job(job_id, actual_duration=duration)

        assert exc_info.value.field == "actual_duration"
        stored = await job_crud.get_by_id(test_async_db, job_id)
        assert stored.status == JobStatus.IN_PROGRESS
        assert stored.actual_duration is None

    @pytest.mark.parametrize(
        "status", [JobStatus.REQUESTED, JobStatus.ACCEPTED, JobStatus.COMPLETED]
    )
    async def test_complete_job_should_raise_precondition_outside_in_progress(
        self, service: BookingService, make_job: JobFactory, status: JobStatus
    ) -> None:
        # Arrange
        job = await make_job(status)

        # Act & Assert
        with pytest.raises(PreconditionError):
            await service.complete_job(job.id, actual_duration=2.0)


class TestCancelBooking:
    """Test suite for cancel_booking()."""

    async def test_cancel_booking_by_homeowner_should_notify_maid(
        self,
        service: BookingService,
        make_job: JobFactory,
        dispatcher: AsyncMock,
        homeowner_id: uuid.UUID,
        maid_id: uuid.UUID,
    ) -> None:
        # Arrange
        job = await make_job(JobStatus.ACCEPTED)

        # Act
        result = await service.cancel_booking(homeowner_id, job.id)

        # Assert
        assert result.status == JobStatus.CANCELLED
        event, recipient, payload = dispatcher.notify.await_args.args
        assert event == NotificationEvent.JOB_CANCELLED
        assert recipient == maid_id
        assert payload["cancelled_by"] == "homeowner"

    async def test_cancel_booking_by_maid_should_notify_homeowner(
        self,
        service: BookingService,
        make_job: JobFactory,
        dispatcher: AsyncMock,
        homeowner_id: uuid.UUID,
        maid_id: uuid.UUID,
    ) -> None:
        # Arrange
        job = await make_job(JobStatus.REQUESTED)

        # Act
        await service.cancel_booking(maid_id, job.id)

        # Assert
        _, recipient, payload = dispatcher.notify.await_args.args
        assert recipient == homeowner_id
        assert payload["cancelled_by"] == "maid"

    async def test_cancel_booking_should_reject_in_progress_job(
        self,
        service: BookingService,
        test_async_db: AsyncSession,
        make_job: JobFactory,
        homeowner_id: uuid.UUID,
    ) -> None:
        # Arrange
        job = await make_job(JobStatus.IN_PROGRESS)
        job_id = job.id

        # Act & Assert
        with pytest.raises(PreconditionError) as exc_info:
            await service.cancel_booking(homeowner_id, job_id)

        assert exc_info.value.current_status == "in_progress"
        stored = await job_crud.get_by_id(test_async_db, job_id)
        assert stored.status == JobStatus.IN_PROGRESS

    async def test_cancel_booking_should_hide_job_from_stranger(
        self, service: BookingService, make_job: JobFactory
    ) -> None:
        # Arrange
        job = await make_job(JobStatus.REQUESTED)

        # Act & Assert
        with pytest.raises(NotFoundError):
            await service.cancel_booking(uuid.uuid4(), job.id)


class TestUpdateTaskProgress:
    """Test suite for update_task_progress()."""

    async def test_update_task_progress_should_recompute_progress(
        self,
        service: BookingService,
        make_job: JobFactory,
        dispatcher: AsyncMock,
        maid_id: uuid.UUID,
    ) -> None:
        # Arrange
        job = await make_job(JobStatus.IN_PROGRESS, tasks=TASKS)

        # Act
        result = await service.update_task_progress(
            job.id,
            [{"index": 0, "completed": True}, {"index": 2, "notes": "Use the blue cloth"}],
            maid_id=maid_id,
        )

        # Assert
        assert result.progress_percentage == 33
        assert result.status == JobStatus.IN_PROGRESS
        assert result.tasks[0]["completed"] is True
        assert result.tasks[0]["completed_at"] == FIXED_NOW.isoformat()
        assert result.tasks[2]["notes"] == "Use the blue cloth"
        assert result.version == 2
        event, _, payload = dispatcher.notify.await_args.args
        assert event == NotificationEvent.JOB_PROGRESS
        assert payload["progress_percentage"] == 33

    async def test_update_task_progress_should_clear_completed_at_when_unchecked(
        self, service: BookingService, make_job: JobFactory
    ) -> None:
        # Arrange
        done = [dict(task, completed=True, completed_at="2026-03-18T10:00:00") for task in TASKS]
        job = await make_job(JobStatus.ACCEPTED, tasks=done)

        # Act
        result = await service.update_task_progress(job.id, [{"index": 1, "completed": False}])

        # Assert
        assert result.tasks[1]["completed_at"] is None
        assert result.progress_percentage == 66

    async def test_update_task_progress_should_reject_bad_index(
        self, service: BookingService, make_job: JobFactory
    ) -> None:
        # Arrange
        job = await make_job(JobStatus.IN_PROGRESS, tasks=TASKS)

        # Act & Assert
        with pytest.raises(ValidationError) as exc_info:
            await service.update_task_progress(job.id, [{"index": 3, "completed": True}])

        assert exc_info.value.field == "index"

    async def test_update_task_progress_should_reject_completed_job(
        self, service: BookingService, make_job: JobFactory
    ) -> None:
        # Arrange
        job = await make_job(JobStatus.COMPLETED, tasks=TASKS)

        # Act & Assert
        with pytest.raises(PreconditionError):
            await service.update_task_progress(job.id, [{"index": 0, "completed": True}])

    async def test_update_task_progress_should_raise_conflict_on_stale_version(
        self,
        service: BookingService,
        make_job: JobFactory,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test a concurrent task write between read and update surfaces as conflict."""
        # Arrange
        job = await make_job(JobStatus.IN_PROGRESS, tasks=TASKS)
        monkeypatch.setattr(job_crud, "replace_tasks", AsyncMock(return_value=None))

        # Act & Assert
        with pytest.raises(ConflictError):
            await service.update_task_progress(job.id, [{"index": 0, "completed": True}])


class TestReads:
    """Test suite for get_job() and list_jobs()."""

    async def test_get_job_should_hide_job_from_unrelated_maid(
        self, service: BookingService, make_job: JobFactory, other_maid_id: uuid.UUID
    ) -> None:
        # Arrange
        job = await make_job(JobStatus.ACCEPTED)

        # Act & Assert
        with pytest.raises(NotFoundError):
            await service.get_job(Actor(id=other_maid_id, role=UserRole.MAID), job.id)

    async def test_get_job_should_allow_admin(
        self, service: BookingService, make_job: JobFactory, admin_id: uuid.UUID
    ) -> None:
        # Arrange
        job = await make_job(JobStatus.ACCEPTED)

        # Act
        result = await service.get_job(Actor(id=admin_id, role=UserRole.ADMIN), job.id)

        # Assert
        assert result.id == job.id

    async def test_list_jobs_should_scope_to_actor_role(
        self,
        service: BookingService,
        make_job: JobFactory,
        homeowner_id: uuid.UUID,
        other_maid_id: uuid.UUID,
        admin_id: uuid.UUID,
    ) -> None:
        # Arrange
        mine = await make_job(JobStatus.REQUESTED)
        await make_job(JobStatus.ACCEPTED, maid_id=other_maid_id)

        # Act
        homeowner_jobs = await service.list_jobs(
            Actor(id=homeowner_id, role=UserRole.HOMEOWNER)
        )
        maid_jobs = await service.list_jobs(Actor(id=other_maid_id, role=UserRole.MAID))
        admin_requested = await service.list_jobs(
            Actor(id=admin_id, role=UserRole.ADMIN), status=JobStatus.REQUESTED
        )

        # Assert
        assert len(homeowner_jobs) == 2
        assert len(maid_jobs) == 1
        assert [j.id for j in admin_requested] == [mine.id]
