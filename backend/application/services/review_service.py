"""
Review service orchestrator.

Homeowners rate the maid after a completed job. One review per job and
reviewer is enforced by a unique constraint; the losing insert of a
double submission becomes a ConflictError.

Dependencies: backend.boundary.db.CRUD, backend.boundary.notifications
System role: Review use case orchestration
"""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.application.services.unit_of_work import unit_of_work
from backend.boundary.db.CRUD.job_crud import job_crud
from backend.boundary.db.CRUD.review_crud import review_crud
from backend.boundary.db.models.review_model import ReviewModel
from backend.boundary.notifications import (
    LoggingNotificationDispatcher,
    NotificationDispatcher,
    NotificationEvent,
    dispatch_safely,
)
from backend.core.booking_state import JobStatus
from backend.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    PreconditionError,
    ValidationError,
)
from backend.models.review import RatingSummary

logger = logging.getLogger(__name__)


class ReviewService:
    """Review orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        dispatcher: NotificationDispatcher | None = None,
    ) -> None:
        self.db = db
        self.dispatcher = dispatcher or LoggingNotificationDispatcher()

    async def create_review(
        self,
        reviewer_id: UUID,
        job_id: UUID,
        rating: int,
        comments: str = "",
    ) -> ReviewModel:
        """
        Review the maid of a completed job.

        Args:
            reviewer_id: Homeowner leaving the review
            job_id: Reviewed job
            rating: Integer 1-5
            comments: Free text

        Returns:
            ReviewModel: Created review; reviewee is the job's maid

        Raises:
            ValidationError: Rating not an integer in 1-5
            NotFoundError: Job or its maid missing
            AuthorizationError: Reviewer is not the job's homeowner
            PreconditionError: Job is not completed
            ConflictError: Reviewer already reviewed this job
        """
        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
            raise ValidationError("Rating must be an integer from 1 to 5", field="rating")

        async with unit_of_work(
            self.db, logger, "Create review", job_id=job_id, reviewer_id=reviewer_id
        ):
            job = await job_crud.get_by_id(self.db, job_id)
            if job is None:
                raise NotFoundError("job", str(job_id))
            if job.homeowner_id != reviewer_id:
                raise AuthorizationError(
                    "Only the homeowner of this job can review it",
                    actor_id=str(reviewer_id),
                )
            if job.status != JobStatus.COMPLETED:
                raise PreconditionError(
                    "Only completed jobs can be reviewed",
                    current_status=job.status.value,
                )
            if job.maid_id is None:
                raise NotFoundError("maid", message="No maid is assigned to this job")

            try:
                review = await review_crud.create(
                    self.db,
                    job_id=job_id,
                    reviewer_id=reviewer_id,
                    reviewee_id=job.maid_id,
                    rating=rating,
                    comments=comments or "",
                )
            except IntegrityError as e:
                raise ConflictError(
                    "You have already reviewed this job",
                    details={"job_id": str(job_id)},
                ) from e

        logger.info(
            "Review created",
            extra={"review_id": str(review.id), "job_id": str(job_id), "rating": rating},
        )
        await dispatch_safely(
            self.dispatcher,
            NotificationEvent.NEW_REVIEW,
            review.reviewee_id,
            {"job_id": str(job_id), "job_title": job.title, "rating": rating},
        )
        return review

    async def rating_summary(self, reviewee_id: UUID) -> RatingSummary:
        """Average rating (1 dp), review count and 1-5 distribution."""
        counts = await review_crud.rating_distribution(self.db, reviewee_id)
        distribution = {rating: counts.get(rating, 0) for rating in range(1, 6)}
        total = sum(distribution.values())
        average = (
            round(sum(r * n for r, n in distribution.items()) / total, 1) if total else 0.0
        )
        return RatingSummary(
            reviewee_id=reviewee_id,
            average_rating=average,
            total_reviews=total,
            distribution=distribution,
        )

    async def list_reviews(
        self, reviewee_id: UUID, limit: int = 50, offset: int = 0
    ) -> Sequence[ReviewModel]:
        """Reviews received by a user, newest first."""
        return await review_crud.list_for_reviewee(
            self.db, reviewee_id, limit=limit, offset=offset
        )
