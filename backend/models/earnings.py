"""
Earnings domain models and schemas.

Read-only financial summaries for maids, homeowners and administrators.

Dependencies: pydantic
System role: Reporting API contracts
"""

import enum
import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from backend.boundary.db.models.payment_model import PaymentStatus

ZERO = Decimal("0.00")


class EarningsRange(str, enum.Enum):
    """Reporting window for maid earnings."""

    ALL = "all"
    MONTH = "month"
    WEEK = "week"


class MonthlyTotal(BaseModel):
    """Paid totals for one calendar month of paid_at."""

    period: str = Field(description="Calendar month as YYYY-MM")
    amount: Decimal = ZERO
    commission: Decimal = ZERO
    maid_earnings: Decimal = ZERO
    payment_count: int = 0


class StatusTotal(BaseModel):
    """Totals for one payment status."""

    status: PaymentStatus
    count: int
    amount: Decimal
    commission: Decimal
    maid_earnings: Decimal


class MaidEarningsSummary(BaseModel):
    """Maid payout summary."""

    maid_id: uuid.UUID
    range: EarningsRange
    total_earned: Decimal = ZERO
    pending: Decimal = ZERO
    total_commission: Decimal = ZERO
    payment_count: int = 0
    monthly: list[MonthlyTotal] = Field(default_factory=list)


class HomeownerSpendingSummary(BaseModel):
    """Homeowner spending summary."""

    homeowner_id: uuid.UUID
    total_spent: Decimal = ZERO
    pending: Decimal = ZERO
    payment_count: int = 0
    monthly: list[MonthlyTotal] = Field(default_factory=list)


class AdminPaymentStats(BaseModel):
    """Platform-wide payment statistics."""

    total_paid: Decimal = ZERO
    total_pending: Decimal = ZERO
    paid_this_month: Decimal = ZERO
    due_this_week: Decimal = ZERO
    total_commission: Decimal = ZERO
    by_status: list[StatusTotal] = Field(default_factory=list)


class PendingPayment(BaseModel):
    """Completed job still waiting for the homeowner to pay."""

    job_id: uuid.UUID
    title: str
    maid_id: uuid.UUID | None
    completed_at: datetime | None
    amount_due: Decimal
