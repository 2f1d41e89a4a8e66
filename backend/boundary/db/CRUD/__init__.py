"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from backend.boundary.db.CRUD import job_crud, payment_crud

    # Use singleton instances
    job = await job_crud.get_by_id(db, job_id)

    # Or instantiate classes directly for custom behavior
    from backend.boundary.db.CRUD import JobCRUD
    custom_crud = JobCRUD()
"""

from backend.boundary.db.CRUD.base_crud import BaseCRUD
from backend.boundary.db.CRUD.job_crud import JobCRUD, job_crud
from backend.boundary.db.CRUD.payment_crud import PaymentCRUD, payment_crud
from backend.boundary.db.CRUD.review_crud import ReviewCRUD, review_crud

__all__ = [
    "BaseCRUD",
    "JobCRUD",
    "job_crud",
    "PaymentCRUD",
    "payment_crud",
    "ReviewCRUD",
    "review_crud",
]
