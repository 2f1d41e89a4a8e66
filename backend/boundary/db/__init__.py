"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - JobModel, PaymentModel, ReviewModel: Core domain entities
  - PaymentMethod, PaymentProvider, PaymentStatus: Settlement enums
  - job_crud, payment_crud, review_crud: CRUD operation singletons

Dependencies: sqlalchemy, backend.configs
System role: Entity store for bookings, payments and reviews
"""

from backend.boundary.db.base import Base, TimestampMixin, UUIDMixin
from backend.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from backend.boundary.db.models import (
    JobModel,
    PaymentMethod,
    PaymentModel,
    PaymentProvider,
    PaymentStatus,
    ReviewModel,
)
from backend.boundary.db.CRUD import (
    BaseCRUD,
    JobCRUD,
    PaymentCRUD,
    ReviewCRUD,
    job_crud,
    payment_crud,
    review_crud,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "JobModel",
    "PaymentModel",
    "PaymentMethod",
    "PaymentProvider",
    "PaymentStatus",
    "ReviewModel",
    # CRUD classes
    "BaseCRUD",
    "JobCRUD",
    "PaymentCRUD",
    "ReviewCRUD",
    # CRUD singletons
    "job_crud",
    "payment_crud",
    "review_crud",
]
