"""
Job ORM model.

A booking between a homeowner and a maid: schedule, rate, lifecycle
status, task checklist and settlement status.

Dependencies: sqlalchemy, backend.boundary.db.base, backend.core.booking_state
System role: Booking persistence for the lifecycle manager
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    Enum,
    Float,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from backend.boundary.db.base import Base, TimestampMixin, UUIDMixin, enum_values
from backend.boundary.db.models.payment_model import PaymentMethod
from backend.core.booking_state import JobPaymentStatus, JobStatus


class JobModel(Base, UUIDMixin, TimestampMixin):
    """
    Job (booking) ORM model.

    Status only moves forward through the lifecycle, except into cancelled.
    Every status change is written with a conditional UPDATE keyed on the
    expected prior status, never as read-modify-write.

    Attributes:
        homeowner_id: User who requested the booking
        maid_id: Maid user assigned; NULL for an open request any maid may claim
        title, description, address: Booking details
        scheduled_datetime: When work is planned to start
        status: requested / accepted / in_progress / completed / cancelled
        hourly_rate: Agreed rate (>= 0)
        estimated_duration: Planned hours (default 4.0)
        actual_duration: Worked hours; written once at completion
        payment_status: none / awaiting_payment / paid
        payment_method: Homeowner's preferred method
        tasks: Ordered list of {name, completed, completed_at, notes}
        progress_percentage: completed tasks / total tasks, whole percent
        started_at, completed_at, cancelled_at: Lifecycle timestamps
        cancelled_by: Actor who cancelled or declined
        version: Bumped on every task-list write for optimistic concurrency
    """

    __tablename__ = "jobs"
    __table_args__ = (
        CheckConstraint("hourly_rate >= 0", name="ck_jobs_hourly_rate_non_negative"),
        CheckConstraint(
            "progress_percentage >= 0 AND progress_percentage <= 100",
            name="ck_jobs_progress_range",
        ),
    )

    homeowner_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    maid_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True, index=True)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    scheduled_datetime: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )

    status: Mapped[JobStatus] = mapped_column(
        Enum(JobStatus, native_enum=False, values_callable=enum_values),
        nullable=False,
        default=JobStatus.REQUESTED,
        index=True,
    )

    hourly_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    estimated_duration: Mapped[float] = mapped_column(Float, nullable=False, default=4.0)
    actual_duration: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)

    payment_status: Mapped[JobPaymentStatus] = mapped_column(
        Enum(JobPaymentStatus, native_enum=False, values_callable=enum_values),
        nullable=False,
        default=JobPaymentStatus.NONE,
    )
    payment_method: Mapped[PaymentMethod] = mapped_column(
        Enum(PaymentMethod, native_enum=False, values_callable=enum_values),
        nullable=False,
        default=PaymentMethod.CASH,
    )

    tasks: Mapped[list] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        doc="Ordered task checklist",
    )
    progress_percentage: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        doc="Progress percentage (0-100)",
    )

    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    cancelled_by: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
