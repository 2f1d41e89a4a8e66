"""
Review domain models and schemas.

Dependencies: pydantic
System role: Review API contracts
"""

from pydantic import BaseModel, ConfigDict, Field
import uuid
from datetime import datetime


class CreateReviewRequest(BaseModel):
    """Request schema for reviewing a completed job."""

    job_id: uuid.UUID
    rating: int = Field(..., ge=1, le=5, description="Star rating 1-5")
    comments: str = Field("", max_length=2000)


class ReviewResponse(BaseModel):
    """Response schema for a review."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    job_id: uuid.UUID
    reviewer_id: uuid.UUID
    reviewee_id: uuid.UUID
    rating: int
    comments: str
    created_at: datetime


class RatingSummary(BaseModel):
    """Aggregate rating of a reviewee."""

    reviewee_id: uuid.UUID
    average_rating: float = 0.0
    total_reviews: int = 0
    distribution: dict[int, int] = Field(
        default_factory=lambda: {rating: 0 for rating in range(1, 6)}
    )
