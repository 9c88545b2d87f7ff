"""
Trip inventory: authoritative seat counters plus the public trip reads.

SEAT COUNTER DISCIPLINE
=======================

`booked_participants` is only ever changed through `reserve_seats` and
`release_seats`, and only by the booking transaction manager. Both issue a
relative UPDATE guarded in its WHERE clause:

  UPDATE trips SET booked_participants = booked_participants + :n
  WHERE id = :id AND booked_participants + :n <= max_participants

  UPDATE trips SET booked_participants = booked_participants - :n
  WHERE id = :id AND booked_participants >= :n

Clients never supply absolute counts. Combined with the row lock taken by
`get_bookable(..., lock=True)` this keeps 0 <= booked <= max under any
interleaving; on engines that ignore FOR UPDATE the guard alone is enough.
"""

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import CapacityExceededException, NotFoundException
from app.core.logging import get_logger
from app.models.provider import Provider
from app.models.trip import Trip, TripStatus, ApprovalStatus

logger = get_logger(__name__)

SEARCH_RESULT_LIMIT = 100

# Approved and not soft-deleted: may be shown, reviewed, complained about
VISIBLE = (
    Trip.approval_status == ApprovalStatus.APPROVED,
    Trip.is_deleted.is_(False),
)
# Visible and open for new bookings
BOOKABLE = (*VISIBLE, Trip.status == TripStatus.PUBLISHED)


class TripInventory:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_bookable(self, public_id: str, lock: bool = False) -> Trip:
        """
        Resolve a bookable trip by public id.
        With `lock=True` the row is locked for the rest of the transaction and
        always re-read from the database, never served from the identity map.
        """
        query = select(Trip).where(Trip.public_id == public_id, *BOOKABLE)
        if lock:
            query = query.with_for_update().execution_options(populate_existing=True)

        trip = (await self.db.execute(query)).scalar_one_or_none()
        if trip is None:
            raise NotFoundException("Trip not found or not available for booking.")
        return trip

    async def get_visible(self, public_id: str) -> Trip:
        result = await self.db.execute(select(Trip).where(Trip.public_id == public_id, *VISIBLE))
        trip = result.scalar_one_or_none()
        if trip is None:
            raise NotFoundException("Trip not found.")
        return trip

    async def get_by_id(self, trip_id: int) -> Trip | None:
        result = await self.db.execute(select(Trip).where(Trip.id == trip_id))
        return result.scalar_one_or_none()

    async def remaining_seats(self, trip_id: int) -> int:
        result = await self.db.execute(
            select(Trip.max_participants - Trip.booked_participants).where(Trip.id == trip_id)
        )
        remaining = result.scalar_one_or_none()
        return max(remaining or 0, 0)

    async def reserve_seats(self, trip: Trip, seats: int) -> None:
        """Increment the booked counter; CapacityExceeded if it would overflow."""
        result = await self.db.execute(
            update(Trip)
            .where(
                Trip.id == trip.id,
                Trip.booked_participants + seats <= Trip.max_participants,
            )
            .values(booked_participants=Trip.booked_participants + seats)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            remaining = await self.remaining_seats(trip.id)
            logger.warning(
                "seat_reservation_rejected",
                trip_id=trip.id,
                requested=seats,
                remaining=remaining,
            )
            raise CapacityExceededException(remaining)

        await self.db.refresh(trip, attribute_names=["booked_participants", "updated_at"])

    async def release_seats(self, trip_id: int, seats: int) -> bool:
        """
        Decrement the booked counter if it holds at least `seats`.
        Returns False when the guard matched nothing (counter drift).
        """
        result = await self.db.execute(
            update(Trip)
            .where(Trip.id == trip_id, Trip.booked_participants >= seats)
            .values(booked_participants=Trip.booked_participants - seats)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def list_trips(self, page: int = 1, page_size: int = 20) -> tuple[list[Trip], int]:
        """Bookable trips, newest first, with their provider."""
        query = select(Trip).where(*BOOKABLE)

        count_query = select(func.count()).select_from(query.subquery())
        total = (await self.db.execute(count_query)).scalar()

        result = await self.db.execute(
            query.options(selectinload(Trip.provider))
            .order_by(Trip.created_at.desc(), Trip.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return list(result.scalars().all()), total

    async def search_by_location(self, keyword: str) -> list[Trip]:
        return await self._search(Trip.location, keyword)

    async def search_by_gathering_point(self, keyword: str) -> list[Trip]:
        return await self._search(Trip.gathering_point_name, keyword)

    async def _search(self, column, keyword: str) -> list[Trip]:
        result = await self.db.execute(
            select(Trip)
            .where(*BOOKABLE, column.icontains(keyword, autoescape=True))
            .options(selectinload(Trip.provider))
            .order_by(Trip.created_at.desc(), Trip.id.desc())
            .limit(SEARCH_RESULT_LIMIT)
        )
        return list(result.scalars().all())

    async def get_detail(self, public_id: str) -> Trip:
        """Visible trip with provider and provider account loaded."""
        result = await self.db.execute(
            select(Trip)
            .where(Trip.public_id == public_id, *VISIBLE)
            .options(selectinload(Trip.provider).selectinload(Provider.user))
        )
        trip = result.scalar_one_or_none()
        if trip is None:
            raise NotFoundException("Trip not found.")
        return trip
