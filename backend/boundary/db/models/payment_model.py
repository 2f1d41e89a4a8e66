"""
Payment ORM model.

One settlement record per booking: gross amount, the commission split
captured at creation time, and payout status.

Dependencies: sqlalchemy, backend.boundary.db.base
System role: Settlement persistence for bookings
"""

import enum
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Numeric,
    String,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from backend.boundary.db.base import Base, TimestampMixin, UUIDMixin, enum_values


class PaymentMethod(str, enum.Enum):
    """How the homeowner pays."""

    CARD = "card"
    APPLE_PAY = "apple_pay"
    CASH = "cash"


class PaymentProvider(str, enum.Enum):
    """Processor behind a payment method."""

    STRIPE = "stripe"
    APPLE_PAY = "apple_pay"
    CASH = "cash"


class PaymentStatus(str, enum.Enum):
    """
    Payment record states.

    PENDING: Created, money not yet confirmed (cash awaiting admin check)
    PAID: Settled; paid_at is set
    FAILED: Processor rejected the charge
    REFUNDED: Money returned to the homeowner
    """

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


PROVIDER_BY_METHOD: dict[PaymentMethod, PaymentProvider] = {
    PaymentMethod.CARD: PaymentProvider.STRIPE,
    PaymentMethod.APPLE_PAY: PaymentProvider.APPLE_PAY,
    PaymentMethod.CASH: PaymentProvider.CASH,
}


class PaymentModel(Base, UUIDMixin, TimestampMixin):
    """
    Payment ORM model.

    commission_rate, commission_amount and maid_earnings are written once
    when the record is created and never recomputed, so later changes to
    the platform rate leave historical earnings untouched.

    Attributes:
        booking_id: Job this payment settles
        homeowner_id: Paying user
        maid_id: Maid user receiving maid_earnings
        method: card / apple_pay / cash
        provider: Processor derived from method
        amount: Gross amount (hourly_rate x billable hours)
        commission_rate: Platform percentage captured at creation
        commission_amount: round(amount x rate / 100, 2)
        maid_earnings: round(amount - commission_amount, 2); NULL on legacy rows
        currency: ISO currency code
        status: pending / paid / failed / refunded
        paid_at: Set on the transition to paid
        superseded_at: Set when a later settlement replaced this pending record

    Constraints:
        uq_payments_live_booking: at most one non-superseded payment per booking
    """

    __tablename__ = "payments"
    __table_args__ = (
        Index(
            "uq_payments_live_booking",
            "booking_id",
            unique=True,
            postgresql_where=text("superseded_at IS NULL"),
            sqlite_where=text("superseded_at IS NULL"),
        ),
        CheckConstraint("amount >= 0", name="ck_payments_amount_non_negative"),
        CheckConstraint(
            "commission_rate >= 0 AND commission_rate <= 100",
            name="ck_payments_commission_rate_range",
        ),
    )

    booking_id: Mapped[UUID] = mapped_column(
        ForeignKey("jobs.id", ondelete="RESTRICT"),
        nullable=False,
    )
    homeowner_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    maid_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)

    method: Mapped[PaymentMethod] = mapped_column(
        Enum(PaymentMethod, native_enum=False, values_callable=enum_values),
        nullable=False,
    )
    provider: Mapped[PaymentProvider] = mapped_column(
        Enum(PaymentProvider, native_enum=False, values_callable=enum_values),
        nullable=False,
        default=PaymentProvider.CASH,
    )

    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    commission_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    commission_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0"),
    )
    maid_earnings: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2),
        nullable=True,
        doc="Authoritative payout figure; NULL only on records predating the split",
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")

    status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus, native_enum=False, values_callable=enum_values),
        nullable=False,
        default=PaymentStatus.PENDING,
        index=True,
    )
    paid_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )
    superseded_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )
