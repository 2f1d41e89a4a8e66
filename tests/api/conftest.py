"""
Fixtures for API router tests.

Services are replaced with AsyncMocks through dependency_overrides; the
caller identity travels in the same headers the upstream auth layer sets.
"""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from backend.api.deps import (
    get_booking_service,
    get_earnings_service,
    get_payment_service,
    get_review_service,
)
from backend.api.main import create_app
from backend.boundary.db.models.job_model import JobModel
from backend.boundary.db.models.payment_model import (
    PaymentMethod,
    PaymentModel,
    PaymentProvider,
    PaymentStatus,
)
from backend.core.booking_state import JobPaymentStatus, JobStatus
from backend.models.actor import UserRole

NOW = datetime(2026, 3, 18, 15, 30, tzinfo=timezone.utc)


def actor_headers(user_id: uuid.UUID, role: UserRole) -> dict[str, str]:
    """Identity headers for a caller."""
    return {"X-User-Id": str(user_id), "X-User-Role": role.value}


def build_job(**overrides: Any) -> JobModel:
    """Transient JobModel with every response field populated."""
    values: dict[str, Any] = {
        "id": uuid.uuid4(),
        "homeowner_id": uuid.uuid4(),
        "maid_id": uuid.uuid4(),
        "title": "Deep clean",
        "description": None,
        "address": "12 Harbour St",
        "scheduled_datetime": NOW + timedelta(days=1),
        "status": JobStatus.REQUESTED,
        "hourly_rate": Decimal("20.00"),
        "estimated_duration": 4.0,
        "actual_duration": None,
        "payment_status": JobPaymentStatus.NONE,
        "payment_method": PaymentMethod.CASH,
        "tasks": [],
        "progress_percentage": 0,
        "started_at": None,
        "completed_at": None,
        "cancelled_at": None,
        "created_at": NOW,
        "updated_at": NOW,
    }
    values.update(overrides)
    return JobModel(**values)


def build_payment(**overrides: Any) -> PaymentModel:
    """Transient paid PaymentModel for $100 at 15%."""
    values: dict[str, Any] = {
        "id": uuid.uuid4(),
        "booking_id": uuid.uuid4(),
        "homeowner_id": uuid.uuid4(),
        "maid_id": uuid.uuid4(),
        "method": PaymentMethod.CARD,
        "provider": PaymentProvider.STRIPE,
        "amount": Decimal("100.00"),
        "commission_rate": Decimal("15.00"),
        "commission_amount": Decimal("15.00"),
        "maid_earnings": Decimal("85.00"),
        "currency": "USD",
        "status": PaymentStatus.PAID,
        "paid_at": NOW,
        "created_at": NOW,
    }
    values.update(overrides)
    return PaymentModel(**values)


@pytest.fixture
def booking_service() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def payment_service() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def earnings_service() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def review_service() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def client(
    booking_service: AsyncMock,
    payment_service: AsyncMock,
    earnings_service: AsyncMock,
    review_service: AsyncMock,
) -> TestClient:
    """
    Provide TestClient with every service replaced by a mock.

    Yields:
        TestClient: Client for the assembled application
    """
    app = create_app()
    app.dependency_overrides[get_booking_service] = lambda: booking_service
    app.dependency_overrides[get_payment_service] = lambda: payment_service
    app.dependency_overrides[get_earnings_service] = lambda: earnings_service
    app.dependency_overrides[get_review_service] = lambda: review_service
    yield TestClient(app)
    app.dependency_overrides.clear()
