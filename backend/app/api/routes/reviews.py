"""
Review submission endpoint.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import CurrentUser, customer_or_admin
from app.db.session import get_db
from app.schemas.common import ApiResponse
from app.schemas.review import ReviewCreate, ReviewCreated
from app.services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.post("", response_model=ApiResponse[ReviewCreated], status_code=status.HTTP_201_CREATED)
async def submit_review(
    review_data: ReviewCreate,
    current_user: CurrentUser = Depends(customer_or_admin),
    db: AsyncSession = Depends(get_db),
):
    """Review a trip. Requires a completed booking on it that has not been reviewed."""
    review = await ReviewService(db).submit(
        current_user.id,
        str(review_data.trip_uuid),
        review_data.rating,
        review_data.comment,
    )
    return ApiResponse(
        message="Thank you for your review! It has been submitted successfully.",
        data=ReviewCreated(
            uuid=review.public_id,
            rating=float(review.rating),
            comment=review.comment,
            created_at=review.created_at,
        ),
    )
