"""
Test suite for ReviewCRUD database operations.

System role: Verification of review persistence layer
"""

import uuid

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.review_crud import review_crud
from backend.core.booking_state import JobStatus
from tests.conftest import JobFactory


class TestReviewCRUD:
    """Test suite for review persistence."""

    async def test_create_should_enforce_one_review_per_job_and_reviewer(
        self,
        test_async_db: AsyncSession,
        make_job: JobFactory,
        homeowner_id: uuid.UUID,
        maid_id: uuid.UUID,
    ) -> None:
        # Arrange
        job = await make_job(JobStatus.COMPLETED)
        await review_crud.create(
            test_async_db,
            job_id=job.id,
            reviewer_id=homeowner_id,
            reviewee_id=maid_id,
            rating=5,
        )
        await test_async_db.commit()

        # Act & Assert
        with pytest.raises(IntegrityError):
            await review_crud.create(
                test_async_db,
                job_id=job.id,
                reviewer_id=homeowner_id,
                reviewee_id=maid_id,
                rating=1,
            )

    async def test_get_by_job_and_reviewer_should_find_review(
        self,
        test_async_db: AsyncSession,
        make_job: JobFactory,
        homeowner_id: uuid.UUID,
        maid_id: uuid.UUID,
    ) -> None:
        # Arrange
        job = await make_job(JobStatus.COMPLETED)
        review = await review_crud.create(
            test_async_db,
            job_id=job.id,
            reviewer_id=homeowner_id,
            reviewee_id=maid_id,
            rating=4,
            comments="Spotless",
        )
        await test_async_db.commit()

        # Act
        found = await review_crud.get_by_job_and_reviewer(test_async_db, job.id, homeowner_id)
        missing = await review_crud.get_by_job_and_reviewer(test_async_db, job.id, maid_id)

        # Assert
        assert found.id == review.id
        assert missing is None

    async def test_rating_distribution_should_count_per_star(
        self,
        test_async_db: AsyncSession,
        make_job: JobFactory,
        homeowner_id: uuid.UUID,
        maid_id: uuid.UUID,
    ) -> None:
        # Arrange
        for rating in (5, 5, 3):
            job = await make_job(JobStatus.COMPLETED)
            await review_crud.create(
                test_async_db,
                job_id=job.id,
                reviewer_id=homeowner_id,
                reviewee_id=maid_id,
                rating=rating,
            )
        await test_async_db.commit()

        # Act
        distribution = await review_crud.rating_distribution(test_async_db, maid_id)
        reviews = await review_crud.list_for_reviewee(test_async_db, maid_id)

        # Assert
        assert distribution == {5: 2, 3: 1}
        assert len(reviews) == 3
