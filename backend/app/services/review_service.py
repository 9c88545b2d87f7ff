"""
Review service: only customers with a completed, not-yet-reviewed booking on
a trip may review it.
"""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import ForbiddenException
from app.core.logging import get_logger
from app.models.booking import Booking, BookingStatus
from app.models.review import Review
from app.services.trip_service import TripInventory

logger = get_logger(__name__)

REVIEWABLE_STATUSES = (BookingStatus.COMPLETED,)


class ReviewService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.inventory = TripInventory(db)

    async def find_reviewable_booking(self, user_id: int, trip_id: int) -> Booking | None:
        """A completed booking of this user on this trip that has no review yet."""
        result = await self.db.execute(
            select(Booking)
            .outerjoin(Review, Review.booking_id == Booking.id)
            .where(
                Booking.user_id == user_id,
                Booking.trip_id == trip_id,
                Booking.status.in_(REVIEWABLE_STATUSES),
                Review.id.is_(None),
            )
            .order_by(Booking.created_at.asc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def submit(self, user_id: int, trip_public_id: str, rating: float, comment: str) -> Review:
        trip = await self.inventory.get_visible(trip_public_id)

        booking = await self.find_reviewable_booking(user_id, trip.id)
        if booking is None:
            logger.warning("review_rejected", user_id=user_id, trip_id=trip.id)
            raise ForbiddenException(
                "Review failed. You must have a completed booking for this trip "
                "that you have not reviewed yet."
            )

        review = Review(
            user_id=user_id,
            trip_id=trip.id,
            booking_id=booking.id,
            rating=Decimal(str(rating)),
            comment=comment,
        )
        self.db.add(review)
        await self.db.flush()

        logger.info("review_created", review_id=review.id, trip_id=trip.id, booking_id=booking.id)
        return review

    async def list_for_trip(self, trip_public_id: str) -> list[Review]:
        """Reviews of a trip, newest first, with the reviewer loaded."""
        trip = await self.inventory.get_visible(trip_public_id)
        result = await self.db.execute(
            select(Review)
            .where(Review.trip_id == trip.id)
            .options(selectinload(Review.user))
            .order_by(Review.created_at.desc(), Review.id.desc())
        )
        return list(result.scalars().all())
