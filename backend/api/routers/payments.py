"""
Payment API endpoints.

Routes:
- POST /payments/cash - Record a pending cash payment (homeowner)
- POST /payments/process - Settle a completed booking (homeowner)
- GET /payments - Filter all payments (admin)
- GET /payments/mine - Payment history of the caller
- GET /payments/{id} - Get single payment
- POST /payments/{id}/mark-paid - Confirm a pending payment (admin)

Dependencies: backend.application.services, backend.models
System role: Settlement HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from backend.api.deps.dependencies import (
    get_actor,
    get_payment_service,
    require_roles,
)
from backend.api.routers.router_utils import handle_domain_errors
from backend.application.services.payment_service import PaymentService
from backend.boundary.db.models.payment_model import PaymentMethod, PaymentStatus
from backend.models.actor import Actor, UserRole
from backend.models.common import PaginatedResponse
from backend.models.payment import (
    CashPaymentRequest,
    PaymentResponse,
    ProcessPaymentRequest,
    SettlementResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/cash", response_model=PaymentResponse, status_code=201)
@handle_domain_errors
async def create_cash_payment(
    request: CashPaymentRequest,
    actor: Actor = Depends(require_roles(UserRole.HOMEOWNER)),
    payment_service: PaymentService = Depends(get_payment_service),
) -> PaymentResponse:
    """
    Record a pending cash payment.

    Repeated calls return the same payment.
    """
    payment = await payment_service.create_cash_payment(request.job_id, actor.id)
    return PaymentResponse.model_validate(payment)


@router.post("/process", response_model=SettlementResponse)
@handle_domain_errors
async def process_payment(
    request: ProcessPaymentRequest,
    actor: Actor = Depends(require_roles(UserRole.HOMEOWNER)),
    payment_service: PaymentService = Depends(get_payment_service),
) -> SettlementResponse:
    """
    Settle a completed booking.

    Raises:
        HTTPException(400): Booking not completed
        HTTPException(403): Caller is not the booking's homeowner
        HTTPException(409): Concurrent settlement in progress
    """
    result = await payment_service.process_payment(
        request.job_id, actor.id, request.method
    )
    return SettlementResponse(
        payment=PaymentResponse.model_validate(result.payment),
        already_paid=result.already_paid,
        message="Payment already completed" if result.already_paid else "Payment successful",
    )


@router.get("", response_model=PaginatedResponse[PaymentResponse])
@handle_domain_errors
async def list_payments(
    status: PaymentStatus | None = Query(None),
    method: PaymentMethod | None = Query(None),
    homeowner_id: UUID | None = Query(None),
    maid_id: UUID | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    actor: Actor = Depends(require_roles(UserRole.ADMIN)),
    payment_service: PaymentService = Depends(get_payment_service),
) -> PaginatedResponse[PaymentResponse]:
    """Filter live payments, newest first."""
    items, total = await payment_service.list_payments(
        status=status,
        method=method,
        homeowner_id=homeowner_id,
        maid_id=maid_id,
        limit=limit,
        offset=offset,
    )
    return PaginatedResponse[PaymentResponse](
        items=[PaymentResponse.model_validate(p) for p in items],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/mine", response_model=list[PaymentResponse])
@handle_domain_errors
async def list_my_payments(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    actor: Actor = Depends(require_roles(UserRole.HOMEOWNER, UserRole.MAID)),
    payment_service: PaymentService = Depends(get_payment_service),
) -> list[PaymentResponse]:
    """Payments made by a homeowner or paid out to a maid."""
    if actor.role == UserRole.HOMEOWNER:
        payments = await payment_service.list_for_homeowner(actor.id, limit, offset)
    else:
        payments = await payment_service.list_for_maid(actor.id, limit, offset)
    return [PaymentResponse.model_validate(p) for p in payments]


@router.get("/{payment_id}", response_model=PaymentResponse)
@handle_domain_errors
async def get_payment(
    payment_id: UUID,
    actor: Actor = Depends(get_actor),
    payment_service: PaymentService = Depends(get_payment_service),
) -> PaymentResponse:
    """Get one payment visible to the caller."""
    return PaymentResponse.model_validate(
        await payment_service.get_payment(actor, payment_id)
    )


@router.post("/{payment_id}/mark-paid", response_model=PaymentResponse)
@handle_domain_errors
async def mark_payment_paid(
    payment_id: UUID,
    actor: Actor = Depends(require_roles(UserRole.ADMIN)),
    payment_service: PaymentService = Depends(get_payment_service),
) -> PaymentResponse:
    """Confirm a pending payment; repeat calls return the paid record."""
    payment = await payment_service.mark_payment_paid(actor.id, payment_id)
    logger.info(
        "Payment confirmed by admin",
        extra={"payment_id": str(payment_id), "admin_id": str(actor.id)},
    )
    return PaymentResponse.model_validate(payment)
