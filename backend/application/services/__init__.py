"""Service orchestrators."""

from .booking_service import BookingService
from .earnings_service import EarningsService
from .payment_service import PaymentService, SettlementResult
from .review_service import ReviewService

__all__ = [
    "BookingService",
    "EarningsService",
    "PaymentService",
    "ReviewService",
    "SettlementResult",
]
