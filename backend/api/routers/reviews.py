"""
Review API endpoints.

Routes:
- POST /reviews - Review the maid of a completed job (homeowner)
- GET /reviews/{reviewee_id} - Reviews received by a user
- GET /reviews/{reviewee_id}/summary - Average rating and distribution

Dependencies: backend.application.services, backend.models
System role: Review HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from backend.api.deps.dependencies import get_actor, get_review_service, require_roles
from backend.api.routers.router_utils import handle_domain_errors
from backend.application.services.review_service import ReviewService
from backend.models.actor import Actor, UserRole
from backend.models.review import CreateReviewRequest, RatingSummary, ReviewResponse

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("", response_model=ReviewResponse, status_code=201)
@handle_domain_errors
async def create_review(
    request: CreateReviewRequest,
    actor: Actor = Depends(require_roles(UserRole.HOMEOWNER)),
    review_service: ReviewService = Depends(get_review_service),
) -> ReviewResponse:
    """
    Review the maid of a completed job.

    Raises:
        HTTPException(400): Job not completed
        HTTPException(409): Job already reviewed by this homeowner
    """
    review = await review_service.create_review(
        actor.id, request.job_id, request.rating, request.comments
    )
    return ReviewResponse.model_validate(review)


@router.get("/{reviewee_id}", response_model=list[ReviewResponse])
@handle_domain_errors
async def list_reviews(
    reviewee_id: UUID,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    actor: Actor = Depends(get_actor),
    review_service: ReviewService = Depends(get_review_service),
) -> list[ReviewResponse]:
    """Reviews received by a user, newest first."""
    reviews = await review_service.list_reviews(reviewee_id, limit=limit, offset=offset)
    return [ReviewResponse.model_validate(r) for r in reviews]


@router.get("/{reviewee_id}/summary", response_model=RatingSummary)
@handle_domain_errors
async def rating_summary(
    reviewee_id: UUID,
    actor: Actor = Depends(get_actor),
    review_service: ReviewService = Depends(get_review_service),
) -> RatingSummary:
    """Average rating, review count and 1-5 distribution."""
    return await review_service.rating_summary(reviewee_id)
