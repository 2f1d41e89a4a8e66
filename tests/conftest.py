"""
Shared test fixtures and configuration for entire test suite.

Provides: SQLite async databases, actor ids, dispatcher mocks, payment
settings and a job factory for building bookings in any lifecycle state.
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Awaitable, Callable
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from backend.boundary.db.create_tables import create_all_tables
from backend.boundary.db.CRUD.job_crud import job_crud
from backend.boundary.db.CRUD.payment_crud import payment_crud
from backend.boundary.db.models.job_model import JobModel
from backend.boundary.db.models.payment_model import (
    PaymentMethod,
    PaymentModel,
    PaymentProvider,
    PaymentStatus,
)
from backend.configs import PaymentSettings
from backend.core.booking_state import JobPaymentStatus, JobStatus

FIXED_NOW = datetime(2026, 3, 18, 15, 30, tzinfo=timezone.utc)

JobFactory = Callable[..., Awaitable[JobModel]]


@pytest.fixture
async def test_engine():
    """
    Create in-memory SQLite async engine with all tables.

    Yields:
        AsyncEngine: Engine sharing one connection across sessions
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_async_db(test_engine: AsyncEngine):
    """
    Create session on the in-memory database.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    session_factory = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def file_session_factory(tmp_path):
    """
    Create file-backed SQLite database for multi-session scenarios.

    Each session gets its own connection, so two sessions observe each
    other only through committed data.

    Yields:
        async_sessionmaker: Factory producing independent sessions
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'marketplace.db'}")
    await create_all_tables(engine)
    yield async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    await engine.dispose()


@pytest.fixture
def homeowner_id() -> uuid.UUID:
    """Generate a homeowner user ID."""
    return uuid.uuid4()


@pytest.fixture
def maid_id() -> uuid.UUID:
    """Generate a maid user ID."""
    return uuid.uuid4()


@pytest.fixture
def other_maid_id() -> uuid.UUID:
    """Generate a second maid user ID."""
    return uuid.uuid4()


@pytest.fixture
def admin_id() -> uuid.UUID:
    """Generate an admin user ID."""
    return uuid.uuid4()


@pytest.fixture
def dispatcher() -> AsyncMock:
    """Provide mock notification dispatcher."""
    return AsyncMock()


@pytest.fixture
def payment_settings() -> PaymentSettings:
    """Provide payment settings with the default 15% commission."""
    return PaymentSettings(
        commission_rate=Decimal("15"),
        currency="USD",
        fallback_duration_hours=4.0,
        mark_awaiting_payment_on_completion=False,
        monthly_periods=6,
    )


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Provide a frozen clock."""
    return lambda: FIXED_NOW


async def create_job(
    session: AsyncSession,
    homeowner_id: uuid.UUID,
    maid_id: uuid.UUID | None,
    status: JobStatus = JobStatus.REQUESTED,
    **overrides: Any,
) -> JobModel:
    """Insert and commit a job in the given lifecycle state."""
    values: dict[str, Any] = {
        "homeowner_id": homeowner_id,
        "maid_id": maid_id,
        "title": "Deep clean",
        "address": "12 Harbour St",
        "scheduled_datetime": FIXED_NOW + timedelta(days=1),
        "hourly_rate": Decimal("20.00"),
        "estimated_duration": 4.0,
        "status": status,
        "payment_status": JobPaymentStatus.NONE,
        "tasks": [],
        "progress_percentage": 0,
    }
    if status in (JobStatus.IN_PROGRESS, JobStatus.COMPLETED):
        values["started_at"] = FIXED_NOW - timedelta(hours=3)
    if status == JobStatus.COMPLETED:
        values["actual_duration"] = 5.0
        values["completed_at"] = FIXED_NOW - timedelta(hours=1)
        values["progress_percentage"] = 100
    values.update(overrides)

    job = await job_crud.create(session, **values)
    await session.commit()
    return job


async def create_payment(
    session: AsyncSession,
    job: JobModel,
    status: PaymentStatus = PaymentStatus.PENDING,
    amount: str = "100.00",
    commission: str = "15.00",
    earnings: str | None = "85.00",
    **overrides: Any,
) -> PaymentModel:
    """Insert and commit a payment for a job; defaults to $100 at 15%."""
    values: dict[str, Any] = {
        "booking_id": job.id,
        "homeowner_id": job.homeowner_id,
        "maid_id": job.maid_id,
        "method": PaymentMethod.CASH,
        "provider": PaymentProvider.CASH,
        "amount": Decimal(amount),
        "commission_rate": Decimal("15"),
        "commission_amount": Decimal(commission),
        "maid_earnings": Decimal(earnings) if earnings is not None else None,
        "status": status,
        "paid_at": FIXED_NOW if status == PaymentStatus.PAID else None,
        "created_at": FIXED_NOW - timedelta(hours=1),
    }
    values.update(overrides)

    payment = await payment_crud.create(session, **values)
    await session.commit()
    return payment


@pytest.fixture
def make_job(test_async_db: AsyncSession, homeowner_id: uuid.UUID, maid_id: uuid.UUID) -> JobFactory:
    """
    Provide factory for jobs owned by the default homeowner and maid.

    Usage:
        job = await make_job(JobStatus.ACCEPTED, hourly_rate=Decimal("30"))
    """

    async def factory(status: JobStatus = JobStatus.REQUESTED, **overrides: Any) -> JobModel:
        overrides.setdefault("homeowner_id", homeowner_id)
        overrides.setdefault("maid_id", maid_id)
        return await create_job(test_async_db, status=status, **overrides)

    return factory
