"""
Review ORM model.

Homeowner feedback on a completed booking.

Dependencies: sqlalchemy, backend.boundary.db.base
System role: Review persistence
"""

from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from backend.boundary.db.base import Base, TimestampMixin, UUIDMixin


class ReviewModel(Base, UUIDMixin, TimestampMixin):
    """
    Review ORM model.

    Constraints:
        uq_reviews_job_reviewer: one review per (job, reviewer)
        ck_reviews_rating_range: rating in [1, 5]
    """

    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("job_id", "reviewer_id", name="uq_reviews_job_reviewer"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
    )

    job_id: Mapped[UUID] = mapped_column(
        ForeignKey("jobs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    reviewer_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    reviewee_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comments: Mapped[str] = mapped_column(Text, nullable=False, default="")
