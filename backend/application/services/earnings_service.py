"""
Earnings service.

Read-only aggregation over committed payments and jobs. Paid versus
pending is decided by Payment.status alone, and maid_earnings is the payout
figure, with gross amount as the fallback for rows that lack a breakdown.

Dependencies: backend.boundary.db.CRUD, backend.models.earnings
System role: Earnings/Reporting Aggregator
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable
from uuid import UUID

from sqlalchemy import ColumnElement, func
from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.job_crud import job_crud
from backend.boundary.db.CRUD.payment_crud import StatusTotals, payment_crud
from backend.boundary.db.models.payment_model import PaymentModel, PaymentStatus
from backend.configs import PaymentSettings, get_settings
from backend.core.booking_state import as_utc, utcnow
from backend.core.commission import billable_amount, billable_hours, round_money
from backend.core.exceptions import ValidationError
from backend.models.earnings import (
    AdminPaymentStats,
    EarningsRange,
    HomeownerSpendingSummary,
    MaidEarningsSummary,
    MonthlyTotal,
    PendingPayment,
    StatusTotal,
)

logger = logging.getLogger(__name__)

EMPTY = StatusTotals(
    status=PaymentStatus.PENDING,
    count=0,
    amount=Decimal("0"),
    commission=Decimal("0"),
    maid_earnings=Decimal("0"),
)


def start_of_month(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def start_of_week(now: datetime) -> datetime:
    """Sunday 00:00 of the current week."""
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight - timedelta(days=(now.weekday() + 1) % 7)


def range_start(range_: EarningsRange, now: datetime) -> datetime | None:
    """First instant of a reporting window; None means all time."""
    if range_ == EarningsRange.MONTH:
        return start_of_month(now)
    if range_ == EarningsRange.WEEK:
        return now - timedelta(days=7)
    return None


class EarningsService:
    """Financial summaries for maids, homeowners and administrators."""

    def __init__(
        self,
        db: AsyncSession,
        settings: PaymentSettings | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """
        Initialize earnings service.

        Args:
            db: Async SQLAlchemy session
            settings: Reporting window sizes and duration fallback
            clock: Source of the current time
        """
        self.db = db
        self.settings = settings or get_settings().payments
        self.clock = clock

    async def maid_summary(
        self,
        maid_id: UUID,
        range_: EarningsRange | str = EarningsRange.ALL,
    ) -> MaidEarningsSummary:
        """
        Summarize a maid's payouts.

        Args:
            maid_id: Maid user UUID
            range_: all, month (since the 1st) or week (last 7 days)

        Returns:
            MaidEarningsSummary: Earned and pending payouts, commission withheld,
            paid count and monthly breakdown

        Raises:
            ValidationError: Unknown range
        """
        try:
            window = EarningsRange(range_)
        except ValueError as e:
            raise ValidationError(f"Unknown earnings range: {range_}", field="range") from e

        conditions: list[ColumnElement[bool]] = [PaymentModel.maid_id == maid_id]
        start = range_start(window, self.clock())
        if start is not None:
            conditions.append(
                func.coalesce(PaymentModel.paid_at, PaymentModel.created_at) >= start
            )

        totals = await payment_crud.totals_by_status(self.db, *conditions)
        paid = totals.get(PaymentStatus.PAID, EMPTY)
        pending = totals.get(PaymentStatus.PENDING, EMPTY)

        return MaidEarningsSummary(
            maid_id=maid_id,
            range=window,
            total_earned=round_money(paid.maid_earnings),
            pending=round_money(pending.maid_earnings),
            total_commission=round_money(paid.commission),
            payment_count=paid.count,
            monthly=await self.monthly_breakdown(PaymentModel.maid_id == maid_id),
        )

    async def homeowner_summary(self, homeowner_id: UUID) -> HomeownerSpendingSummary:
        """Summarize what a homeowner has paid and still owes on recorded payments."""
        totals = await payment_crud.totals_by_status(
            self.db, PaymentModel.homeowner_id == homeowner_id
        )
        paid = totals.get(PaymentStatus.PAID, EMPTY)
        pending = totals.get(PaymentStatus.PENDING, EMPTY)

        return HomeownerSpendingSummary(
            homeowner_id=homeowner_id,
            total_spent=round_money(paid.amount),
            pending=round_money(pending.amount),
            payment_count=paid.count,
            monthly=await self.monthly_breakdown(
                PaymentModel.homeowner_id == homeowner_id
            ),
        )

    async def admin_stats(self, now: datetime | None = None) -> AdminPaymentStats:
        """
        Platform-wide payment statistics.

        paid_this_month counts payments paid since the 1st; due_this_week
        counts pending payments created since Sunday.

        Args:
            now: Reference time (defaults to the service clock)

        Returns:
            AdminPaymentStats: Gross totals, commission and per-status groups
        """
        now = now or self.clock()
        overall = await payment_crud.totals_by_status(self.db)
        this_month = await payment_crud.totals_by_status(
            self.db,
            PaymentModel.status == PaymentStatus.PAID,
            PaymentModel.paid_at >= start_of_month(now),
        )
        this_week = await payment_crud.totals_by_status(
            self.db,
            PaymentModel.status == PaymentStatus.PENDING,
            PaymentModel.created_at >= start_of_week(now),
        )

        paid = overall.get(PaymentStatus.PAID, EMPTY)
        return AdminPaymentStats(
            total_paid=round_money(paid.amount),
            total_pending=round_money(overall.get(PaymentStatus.PENDING, EMPTY).amount),
            paid_this_month=round_money(this_month.get(PaymentStatus.PAID, EMPTY).amount),
            due_this_week=round_money(this_week.get(PaymentStatus.PENDING, EMPTY).amount),
            total_commission=round_money(paid.commission),
            by_status=[
                StatusTotal(
                    status=group.status,
                    count=group.count,
                    amount=round_money(group.amount),
                    commission=round_money(group.commission),
                    maid_earnings=round_money(group.maid_earnings),
                )
                for group in sorted(overall.values(), key=lambda g: g.status.value)
            ],
        )

    async def pending_payments(self, homeowner_id: UUID) -> list[PendingPayment]:
        """Completed jobs awaiting payment with the amount currently due."""
        jobs = await job_crud.list_awaiting_payment(self.db, homeowner_id)
        return [
            PendingPayment(
                job_id=job.id,
                title=job.title,
                maid_id=job.maid_id,
                completed_at=job.completed_at,
                amount_due=billable_amount(
                    job.hourly_rate,
                    billable_hours(
                        job.actual_duration,
                        job.estimated_duration,
                        self.settings.fallback_duration_hours,
                    ),
                ),
            )
            for job in jobs
        ]

    async def monthly_breakdown(
        self,
        *conditions: ColumnElement[bool],
        periods: int | None = None,
    ) -> list[MonthlyTotal]:
        """
        Group paid payments by calendar month of paid_at.

        Args:
            *conditions: Filters (maid, homeowner)
            periods: Months to keep, most recent first; defaults to settings

        Returns:
            list[MonthlyTotal]: Up to `periods` months in ascending order
        """
        periods = periods or self.settings.monthly_periods
        months: dict[str, MonthlyTotal] = {}
        for row in await payment_crud.paid_rows(self.db, *conditions):
            period = as_utc(row.paid_at).strftime("%Y-%m")
            bucket = months.setdefault(period, MonthlyTotal(period=period))
            bucket.amount += row.amount
            bucket.commission += row.commission
            bucket.maid_earnings += row.maid_earnings
            bucket.payment_count += 1

        recent = sorted(months)[-periods:]
        logger.debug(
            "Monthly breakdown built",
            extra={"months_found": len(months), "months_kept": len(recent)},
        )
        return [months[period] for period in recent]
