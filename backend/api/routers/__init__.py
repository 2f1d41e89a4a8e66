"""API routers."""

from .bookings import router as bookings_router
from .earnings import router as earnings_router
from .health import router as health_router
from .payments import router as payments_router
from .reviews import router as reviews_router

__all__ = [
    "bookings_router",
    "earnings_router",
    "health_router",
    "payments_router",
    "reviews_router",
]
