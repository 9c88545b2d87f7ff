"""
Booking ledger: booking rows and their lifecycle.

Lookups that take a caller always filter by owner in the same query, so a
booking that belongs to someone else is indistinguishable from a missing one.
"""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import InvalidTransitionException, NotFoundException
from app.models.booking import Booking, BookingStatus, can_transition
from app.models.trip import Trip


class BookingLedger:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, user_id: int, trip_id: int, num_of_people: int, total_price: Decimal) -> Booking:
        booking = Booking(
            user_id=user_id,
            trip_id=trip_id,
            num_of_people=num_of_people,
            total_price=total_price,
            status=BookingStatus.PENDING,
        )
        self.db.add(booking)
        await self.db.flush()
        return booking

    async def find_owned(self, public_id: str, user_id: int, lock: bool = False) -> Booking | None:
        query = select(Booking).where(Booking.public_id == public_id, Booking.user_id == user_id)
        if lock:
            query = query.with_for_update().execution_options(populate_existing=True)
        return (await self.db.execute(query)).scalar_one_or_none()

    async def transition(self, booking: Booking, target: BookingStatus) -> Booking:
        current = BookingStatus(booking.status)
        if not can_transition(current, target):
            raise InvalidTransitionException(current.value, target.value)
        booking.status = target
        await self.db.flush()
        return booking

    async def list_for_user(self, user_id: int) -> list[Booking]:
        """Booking history, newest first."""
        result = await self.db.execute(
            select(Booking)
            .where(Booking.user_id == user_id)
            .options(selectinload(Booking.trip).selectinload(Trip.provider))
            .order_by(Booking.created_at.desc(), Booking.id.desc())
        )
        return list(result.scalars().all())

    async def get_detail(self, public_id: str, user_id: int) -> Booking:
        result = await self.db.execute(
            select(Booking)
            .where(Booking.public_id == public_id, Booking.user_id == user_id)
            .options(selectinload(Booking.trip).selectinload(Trip.provider))
        )
        booking = result.scalar_one_or_none()
        if booking is None:
            raise NotFoundException("Booking not found.")
        return booking
