"""
Payment CRUD operations.

Provides Create and Read operations for PaymentModel, the guarded
pending-to-paid and supersede updates, and grouped totals used by the
earnings aggregator.

Dependencies: sqlalchemy, backend.boundary.db.models.payment_model
System role: Settlement persistence operations
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Sequence
from uuid import UUID

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.base_crud import BaseCRUD
from backend.boundary.db.models.payment_model import PaymentModel, PaymentStatus

ZERO = Decimal("0")


@dataclass(frozen=True)
class StatusTotals:
    """Summed money columns for one payment status."""

    status: PaymentStatus
    count: int
    amount: Decimal
    commission: Decimal
    maid_earnings: Decimal


@dataclass(frozen=True)
class PaidRow:
    """Minimal projection of a paid payment for period grouping."""

    paid_at: datetime
    amount: Decimal
    commission: Decimal
    maid_earnings: Decimal


def earnings_column():
    """Maid payout with a fallback to gross amount for legacy rows."""
    return func.coalesce(PaymentModel.maid_earnings, PaymentModel.amount)


def _money(value) -> Decimal:
    if value is None:
        return ZERO
    return value if isinstance(value, Decimal) else Decimal(str(value))


class PaymentCRUD(BaseCRUD[PaymentModel]):
    """
    CRUD operations for PaymentModel.

    Extends BaseCRUD with lookups by booking, guarded status updates and
    aggregate queries. Aggregates read committed rows only and never write.
    """

    def __init__(self) -> None:
        """Initialize PaymentCRUD with PaymentModel."""
        super().__init__(PaymentModel)

    async def get_live_by_booking(
        self,
        session: AsyncSession,
        booking_id: UUID,
    ) -> PaymentModel | None:
        """
        Retrieve the non-superseded payment of a booking.

        Args:
            session: Async database session
            booking_id: Job UUID

        Returns:
            PaymentModel if one exists, None otherwise
        """
        stmt = (
            select(PaymentModel)
            .where(
                PaymentModel.booking_id == booking_id,
                PaymentModel.superseded_at.is_(None),
            )
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def mark_paid(
        self,
        session: AsyncSession,
        id: UUID,
        paid_at: datetime,
    ) -> PaymentModel | None:
        """
        Move a pending payment to paid.

        Returns:
            Updated PaymentModel, or None if the payment was not pending
        """
        return await self.update_where(
            session,
            id,
            PaymentModel.status == PaymentStatus.PENDING,
            PaymentModel.superseded_at.is_(None),
            status=PaymentStatus.PAID,
            paid_at=paid_at,
        )

    async def supersede(
        self,
        session: AsyncSession,
        id: UUID,
        superseded_at: datetime,
    ) -> PaymentModel | None:
        """
        Retire a live unpaid payment so a new settlement can replace it.

        Returns:
            Updated PaymentModel, or None if it was already paid or superseded
        """
        return await self.update_where(
            session,
            id,
            PaymentModel.status != PaymentStatus.PAID,
            PaymentModel.superseded_at.is_(None),
            superseded_at=superseded_at,
        )

    async def list_live(
        self,
        session: AsyncSession,
        *conditions: ColumnElement[bool],
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[PaymentModel]:
        """Non-superseded payments matching conditions, newest first."""
        return await self.list_where(
            session,
            PaymentModel.superseded_at.is_(None),
            *conditions,
            order_by=(PaymentModel.created_at.desc(),),
            limit=limit,
            offset=offset,
        )

    async def count_live(
        self,
        session: AsyncSession,
        *conditions: ColumnElement[bool],
    ) -> int:
        """Count non-superseded payments matching conditions."""
        return await self.count_where(
            session,
            PaymentModel.superseded_at.is_(None),
            *conditions,
        )

    async def totals_by_status(
        self,
        session: AsyncSession,
        *conditions: ColumnElement[bool],
    ) -> dict[PaymentStatus, StatusTotals]:
        """
        Group live payments by status and sum their money columns.

        Args:
            session: Async database session
            *conditions: Extra filters (maid, homeowner, date window)

        Returns:
            dict keyed by status; statuses with no rows are absent
        """
        stmt = (
            select(
                PaymentModel.status,
                func.count(PaymentModel.id),
                func.sum(PaymentModel.amount),
                func.sum(PaymentModel.commission_amount),
                func.sum(earnings_column()),
            )
            .where(PaymentModel.superseded_at.is_(None), *conditions)
            .group_by(PaymentModel.status)
        )
        result = await session.execute(stmt)
        totals: dict[PaymentStatus, StatusTotals] = {}
        for status, count, amount, commission, earnings in result.all():
            totals[status] = StatusTotals(
                status=status,
                count=int(count),
                amount=_money(amount),
                commission=_money(commission),
                maid_earnings=_money(earnings),
            )
        return totals

    async def paid_rows(
        self,
        session: AsyncSession,
        *conditions: ColumnElement[bool],
    ) -> list[PaidRow]:
        """
        Project paid payments for calendar grouping, oldest first.

        Args:
            session: Async database session
            *conditions: Extra filters (maid, homeowner)

        Returns:
            list of PaidRow with paid_at set
        """
        stmt = (
            select(
                PaymentModel.paid_at,
                PaymentModel.amount,
                PaymentModel.commission_amount,
                earnings_column(),
            )
            .where(
                PaymentModel.superseded_at.is_(None),
                PaymentModel.status == PaymentStatus.PAID,
                PaymentModel.paid_at.is_not(None),
                *conditions,
            )
            .order_by(PaymentModel.paid_at.asc())
        )
        result = await session.execute(stmt)
        return [
            PaidRow(
                paid_at=paid_at,
                amount=_money(amount),
                commission=_money(commission),
                maid_earnings=_money(earnings),
            )
            for paid_at, amount, commission, earnings in result.all()
        ]


payment_crud = PaymentCRUD()
