"""
Review CRUD operations.

Provides Create and Read operations for ReviewModel with rating
statistics per reviewee.

Dependencies: sqlalchemy, backend.boundary.db.models.review_model
System role: Review persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.base_crud import BaseCRUD
from backend.boundary.db.models.review_model import ReviewModel


class ReviewCRUD(BaseCRUD[ReviewModel]):
    """CRUD operations for ReviewModel."""

    def __init__(self) -> None:
        """Initialize ReviewCRUD with ReviewModel."""
        super().__init__(ReviewModel)

    async def get_by_job_and_reviewer(
        self,
        session: AsyncSession,
        job_id: UUID,
        reviewer_id: UUID,
    ) -> ReviewModel | None:
        """Retrieve the review a reviewer left on a job, if any."""
        stmt = select(ReviewModel).where(
            ReviewModel.job_id == job_id,
            ReviewModel.reviewer_id == reviewer_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_reviewee(
        self,
        session: AsyncSession,
        reviewee_id: UUID,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[ReviewModel]:
        """Reviews received by a user, newest first."""
        return await self.list_where(
            session,
            ReviewModel.reviewee_id == reviewee_id,
            order_by=(ReviewModel.created_at.desc(),),
            limit=limit,
            offset=offset,
        )

    async def rating_distribution(
        self,
        session: AsyncSession,
        reviewee_id: UUID,
    ) -> dict[int, int]:
        """
        Count reviews per star rating for a reviewee.

        Returns:
            dict mapping rating (1-5) to count; ratings with no reviews are absent
        """
        stmt = (
            select(ReviewModel.rating, func.count(ReviewModel.id))
            .where(ReviewModel.reviewee_id == reviewee_id)
            .group_by(ReviewModel.rating)
        )
        result = await session.execute(stmt)
        return {int(rating): int(count) for rating, count in result.all()}


review_crud = ReviewCRUD()
