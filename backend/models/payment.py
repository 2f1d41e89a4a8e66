"""
Payment domain models and schemas.

Request/response schemas for settlement operations.

Dependencies: pydantic
System role: Payment API contracts
"""

from pydantic import BaseModel, ConfigDict, Field
import uuid
from datetime import datetime
from decimal import Decimal

from backend.boundary.db.models.payment_model import (
    PaymentMethod,
    PaymentProvider,
    PaymentStatus,
)


class CashPaymentRequest(BaseModel):
    """Request schema for a cash payment."""

    job_id: uuid.UUID


class ProcessPaymentRequest(BaseModel):
    """Request schema for settling a completed booking."""

    job_id: uuid.UUID
    method: PaymentMethod = Field(PaymentMethod.CARD, description="card, apple_pay or cash")


class PaymentResponse(BaseModel):
    """Response schema for a payment."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    booking_id: uuid.UUID
    homeowner_id: uuid.UUID
    maid_id: uuid.UUID
    method: PaymentMethod
    provider: PaymentProvider
    amount: Decimal
    commission_rate: Decimal
    commission_amount: Decimal
    maid_earnings: Decimal | None
    currency: str
    status: PaymentStatus
    paid_at: datetime | None
    created_at: datetime


class SettlementResponse(BaseModel):
    """Response schema for process_payment."""

    payment: PaymentResponse
    already_paid: bool
    message: str
