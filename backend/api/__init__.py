"""
API routes module.

FastAPI routers for all HTTP endpoints.
"""

from fastapi import APIRouter

from .routers import (
    bookings_router,
    earnings_router,
    health_router,
    payments_router,
    reviews_router,
)

api_router = APIRouter()

# Include all routers
api_router.include_router(health_router)
api_router.include_router(bookings_router)
api_router.include_router(payments_router)
api_router.include_router(earnings_router)
api_router.include_router(reviews_router)

__all__ = ["api_router"]
