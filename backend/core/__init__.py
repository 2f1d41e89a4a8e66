"""
Core business logic module.

Contains the booking state machine, commission math and the exception
hierarchy. Nothing here touches the database or the network.
"""

from backend.core.booking_state import JobPaymentStatus, JobStatus
from backend.core.commission import PaymentBreakdown, compute_breakdown
from backend.core.exceptions import (
    AuthorizationError,
    ConflictError,
    MarketplaceError,
    NotFoundError,
    PreconditionError,
    ValidationError,
)

__all__ = [
    # Exceptions
    "MarketplaceError",
    "ValidationError",
    "AuthorizationError",
    "NotFoundError",
    "PreconditionError",
    "ConflictError",
    # Business logic
    "JobStatus",
    "JobPaymentStatus",
    "PaymentBreakdown",
    "compute_breakdown",
]
