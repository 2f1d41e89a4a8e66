"""
Payment service orchestrator.

Creates and settles payments for bookings. The commission split is computed
once at creation from the configured platform rate and stored on the
payment; later rate changes never touch existing records.

Job and payment writes for one settlement share a single transaction, and
every status change is a guarded UPDATE, so double submissions resolve to
one winner.

Dependencies: backend.boundary.db.CRUD, backend.core.commission, backend.configs
System role: Payment Settlement Engine
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Sequence
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.application.services.unit_of_work import unit_of_work
from backend.boundary.db.CRUD.job_crud import job_crud
from backend.boundary.db.CRUD.payment_crud import payment_crud
from backend.boundary.db.models.job_model import JobModel
from backend.boundary.db.models.payment_model import (
    PROVIDER_BY_METHOD,
    PaymentMethod,
    PaymentModel,
    PaymentStatus,
)
from backend.boundary.notifications import (
    LoggingNotificationDispatcher,
    NotificationDispatcher,
    NotificationEvent,
    dispatch_safely,
)
from backend.configs import PaymentSettings, get_settings
from backend.core.booking_state import JobPaymentStatus, JobStatus, utcnow
from backend.core.commission import (
    PaymentBreakdown,
    billable_amount,
    billable_hours,
    compute_breakdown,
)
from backend.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    PreconditionError,
)
from backend.models.actor import Actor, UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SettlementResult:
    """Outcome of process_payment; already_paid marks a no-op."""

    payment: PaymentModel
    already_paid: bool = False


class PaymentService:
    """Settlement orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        dispatcher: NotificationDispatcher | None = None,
        settings: PaymentSettings | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """
        Initialize payment service.

        Args:
            db: Async SQLAlchemy session
            dispatcher: Notice delivery (defaults to logging only)
            settings: Commission rate, currency and duration fallback
            clock: Source of the current time
        """
        self.db = db
        self.dispatcher = dispatcher or LoggingNotificationDispatcher()
        self.settings = settings or get_settings().payments
        self.clock = clock

    def breakdown_for(self, job: JobModel, hours: float) -> PaymentBreakdown:
        """Split the gross amount for a job billed at the given hours."""
        amount = billable_amount(job.hourly_rate, hours)
        return compute_breakdown(amount, self.settings.commission_rate)

    async def create_cash_payment(self, job_id: UUID, homeowner_id: UUID) -> PaymentModel:
        """
        Record a pending cash payment for a booking.

        Idempotent: if the booking already has a live payment it is returned
        unchanged. A concurrent duplicate insert is rejected by the unique
        index on live payments and the winner's record is returned instead.

        Args:
            job_id: Booking UUID
            homeowner_id: Requesting homeowner

        Returns:
            PaymentModel: The booking's live payment

        Raises:
            NotFoundError: Job or its maid missing
            AuthorizationError: Requester is not the job's homeowner
        """
        async with unit_of_work(
            self.db, logger, "Create cash payment", job_id=job_id, homeowner_id=homeowner_id
        ):
            job = await self._get_owned_job(job_id, homeowner_id)

            existing = await payment_crud.get_live_by_booking(self.db, job_id)
            if existing is not None:
                logger.info(
                    "Cash payment already exists",
                    extra={"job_id": str(job_id), "payment_id": str(existing.id)},
                )
                return existing

            hours = billable_hours(
                None, job.estimated_duration, self.settings.fallback_duration_hours
            )
            breakdown = self.breakdown_for(job, hours)
            try:
                async with self.db.begin_nested():
                    payment = await payment_crud.create(
                        self.db,
                        booking_id=job.id,
                        homeowner_id=job.homeowner_id,
                        maid_id=job.maid_id,
                        method=PaymentMethod.CASH,
                        provider=PROVIDER_BY_METHOD[PaymentMethod.CASH],
                        amount=breakdown.amount,
                        commission_rate=breakdown.commission_rate,
                        commission_amount=breakdown.commission,
                        maid_earnings=breakdown.maid_earnings,
                        currency=self.settings.currency,
                        status=PaymentStatus.PENDING,
                    )
            except IntegrityError:
                existing = await payment_crud.get_live_by_booking(self.db, job_id)
                if existing is None:
                    raise
                logger.info(
                    "Concurrent cash payment resolved to existing record",
                    extra={"job_id": str(job_id), "payment_id": str(existing.id)},
                )
                return existing

        logger.info(
            "Cash payment created",
            extra={
                "job_id": str(job_id),
                "payment_id": str(payment.id),
                "amount": str(payment.amount),
            },
        )
        return payment

    async def process_payment(
        self,
        job_id: UUID,
        homeowner_id: UUID,
        method: PaymentMethod,
    ) -> SettlementResult:
        """
        Settle a completed booking in one step.

        The processor charge always succeeds. The job's payment_status is
        claimed first with a guarded update, then any unpaid live payment is
        superseded and a paid payment is written, all in one transaction.

        Args:
            job_id: Booking UUID
            homeowner_id: Requesting homeowner
            method: Card, Apple Pay or cash

        Returns:
            SettlementResult: New paid payment, or the existing one with
            already_paid=True when the booking was settled before

        Raises:
            NotFoundError: Job or its maid missing
            AuthorizationError: Requester is not the job's homeowner
            PreconditionError: Job is not completed
            ConflictError: A concurrent settlement claimed the job first
        """
        async with unit_of_work(
            self.db, logger, "Process payment", job_id=job_id, homeowner_id=homeowner_id
        ):
            job = await self._get_owned_job(job_id, homeowner_id)

            if job.payment_status == JobPaymentStatus.PAID:
                existing = await payment_crud.get_live_by_booking(self.db, job_id)
                if existing is None:
                    raise ConflictError(
                        "Booking is already paid", details={"job_id": str(job_id)}
                    )
                logger.info(
                    "Payment already completed",
                    extra={"job_id": str(job_id), "payment_id": str(existing.id)},
                )
                return SettlementResult(payment=existing, already_paid=True)

            if job.status != JobStatus.COMPLETED:
                raise PreconditionError(
                    "Job must be completed before payment",
                    current_status=job.status.value,
                )

            claimed = await job_crud.claim_payment(self.db, job_id)
            if claimed is None:
                raise ConflictError(
                    "Payment for this booking is already being processed",
                    details={"job_id": str(job_id)},
                )

            now = self.clock()
            live = await payment_crud.get_live_by_booking(self.db, job_id)
            if live is not None:
                if live.status == PaymentStatus.PAID:
                    return SettlementResult(payment=live, already_paid=True)
                if await payment_crud.supersede(self.db, live.id, now) is None:
                    raise ConflictError(
                        "Existing payment changed concurrently",
                        details={"payment_id": str(live.id)},
                    )

            hours = billable_hours(
                job.actual_duration,
                job.estimated_duration,
                self.settings.fallback_duration_hours,
            )
            breakdown = self.breakdown_for(job, hours)
            payment = await payment_crud.create(
                self.db,
                booking_id=job.id,
                homeowner_id=job.homeowner_id,
                maid_id=job.maid_id,
                method=method,
                provider=PROVIDER_BY_METHOD[method],
                amount=breakdown.amount,
                commission_rate=breakdown.commission_rate,
                commission_amount=breakdown.commission,
                maid_earnings=breakdown.maid_earnings,
                currency=self.settings.currency,
                status=PaymentStatus.PAID,
                paid_at=now,
            )

        logger.info(
            "Payment processed",
            extra={
                "job_id": str(job_id),
                "payment_id": str(payment.id),
                "method": method.value,
                "amount": str(payment.amount),
                "commission": str(payment.commission_amount),
            },
        )
        await dispatch_safely(
            self.dispatcher,
            NotificationEvent.PAYMENT_RECEIVED,
            payment.maid_id,
            {
                "job_id": str(job.id),
                "job_title": job.title,
                "amount": str(payment.maid_earnings),
            },
        )
        return SettlementResult(payment=payment)

    async def mark_payment_paid(self, admin_id: UUID, payment_id: UUID) -> PaymentModel:
        """
        Confirm a pending payment, typically cash collected on site.

        Idempotent for payments that are already paid. Sets the job's
        payment_status to paid and promotes an in-progress job to completed
        in the same transaction.

        Args:
            admin_id: Confirming administrator
            payment_id: Payment UUID

        Returns:
            PaymentModel: The paid payment

        Raises:
            NotFoundError: Payment missing
            PreconditionError: Payment failed, refunded or superseded, or its
                booking was cancelled
        """
        async with unit_of_work(
            self.db, logger, "Mark payment paid", payment_id=payment_id, admin_id=admin_id
        ):
            payment = await payment_crud.get_by_id(self.db, payment_id)
            if payment is None:
                raise NotFoundError("payment", str(payment_id))
            if payment.status == PaymentStatus.PAID:
                logger.info(
                    "Payment already marked as paid", extra={"payment_id": str(payment_id)}
                )
                return payment
            if payment.superseded_at is not None:
                raise PreconditionError(
                    "Payment was replaced by a newer settlement",
                    current_status=payment.status.value,
                )
            if payment.status != PaymentStatus.PENDING:
                raise PreconditionError(
                    "Only pending payments can be marked as paid",
                    current_status=payment.status.value,
                )
            booking = await job_crud.get_by_id(self.db, payment.booking_id)
            if booking is not None and booking.status == JobStatus.CANCELLED:
                raise PreconditionError(
                    "Payments for cancelled bookings cannot be confirmed",
                    current_status=booking.status.value,
                )

            now = self.clock()
            updated = await payment_crud.mark_paid(self.db, payment_id, now)
            if updated is None:
                current = await payment_crud.get_by_id(self.db, payment_id)
                if current is not None and current.status == PaymentStatus.PAID:
                    return current
                raise PreconditionError(
                    "Payment changed concurrently",
                    current_status=current.status.value if current else None,
                )
            job = await job_crud.reconcile_paid(self.db, updated.booking_id, now)
            if job is None:
                booking = await job_crud.get_by_id(self.db, updated.booking_id)
                if booking is not None and booking.status == JobStatus.CANCELLED:
                    raise PreconditionError(
                        "Payments for cancelled bookings cannot be confirmed",
                        current_status=booking.status.value,
                    )

        logger.info(
            "Payment marked as paid",
            extra={
                "payment_id": str(payment_id),
                "admin_id": str(admin_id),
                "job_updated": job is not None,
            },
        )
        if job is not None:
            await dispatch_safely(
                self.dispatcher,
                NotificationEvent.PAYMENT_RECEIVED,
                updated.maid_id,
                {
                    "job_id": str(job.id),
                    "job_title": job.title,
                    "amount": str(updated.maid_earnings),
                },
            )
        return updated

    async def get_payment(self, actor: Actor, payment_id: UUID) -> PaymentModel:
        """
        Read one payment as seen by the actor.

        Raises:
            NotFoundError: Payment missing or not visible to the actor
        """
        payment = await payment_crud.get_by_id(self.db, payment_id)
        if payment is None or not self._can_view(actor, payment):
            raise NotFoundError("payment", str(payment_id))
        return payment

    async def list_payments(
        self,
        status: PaymentStatus | None = None,
        method: PaymentMethod | None = None,
        homeowner_id: UUID | None = None,
        maid_id: UUID | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[Sequence[PaymentModel], int]:
        """
        Filter live payments for administration.

        Returns:
            tuple: (page of payments newest first, total matching count)
        """
        conditions = []
        if status is not None:
            conditions.append(PaymentModel.status == status)
        if method is not None:
            conditions.append(PaymentModel.method == method)
        if homeowner_id is not None:
            conditions.append(PaymentModel.homeowner_id == homeowner_id)
        if maid_id is not None:
            conditions.append(PaymentModel.maid_id == maid_id)

        items = await payment_crud.list_live(self.db, *conditions, limit=limit, offset=offset)
        total = await payment_crud.count_live(self.db, *conditions)
        return items, total

    async def list_for_homeowner(
        self, homeowner_id: UUID, limit: int = 50, offset: int = 0
    ) -> Sequence[PaymentModel]:
        """Payment history of a homeowner, newest first."""
        return await payment_crud.list_live(
            self.db, PaymentModel.homeowner_id == homeowner_id, limit=limit, offset=offset
        )

    async def list_for_maid(
        self, maid_id: UUID, limit: int = 50, offset: int = 0
    ) -> Sequence[PaymentModel]:
        """Payouts of a maid, newest first."""
        return await payment_crud.list_live(
            self.db, PaymentModel.maid_id == maid_id, limit=limit, offset=offset
        )

    async def _get_owned_job(self, job_id: UUID, homeowner_id: UUID) -> JobModel:
        job = await job_crud.get_by_id(self.db, job_id)
        if job is None:
            raise NotFoundError("job", str(job_id))
        if job.homeowner_id != homeowner_id:
            raise AuthorizationError(
                "Not authorized to pay for this booking", actor_id=str(homeowner_id)
            )
        if job.maid_id is None:
            raise NotFoundError("maid", message="No maid is assigned to this booking")
        return job

    @staticmethod
    def _can_view(actor: Actor, payment: PaymentModel) -> bool:
        if actor.is_admin:
            return True
        if actor.role == UserRole.HOMEOWNER:
            return payment.homeowner_id == actor.id
        return payment.maid_id == actor.id
