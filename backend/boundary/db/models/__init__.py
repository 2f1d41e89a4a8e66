"""
Database models package.

Exports:
  - JobModel: Booking ORM model (statuses live in backend.core.booking_state)
  - PaymentModel, PaymentMethod, PaymentProvider, PaymentStatus: Settlement model and enums
  - ReviewModel: Review ORM model

Dependencies: sqlalchemy, backend.boundary.db.base
System role: Database model definitions for domain entities
"""

from backend.boundary.db.models.job_model import JobModel
from backend.boundary.db.models.payment_model import (
    PaymentMethod,
    PaymentModel,
    PaymentProvider,
    PaymentStatus,
)
from backend.boundary.db.models.review_model import ReviewModel

__all__ = [
    "JobModel",
    "PaymentModel",
    "PaymentMethod",
    "PaymentProvider",
    "PaymentStatus",
    "ReviewModel",
]
