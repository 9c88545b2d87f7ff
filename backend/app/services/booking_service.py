"""
Booking transaction manager: the only path that creates or cancels bookings.

CONCURRENCY STRATEGY: Pessimistic Row Lock + Guarded Update
===========================================================

Problem:
  Two customers try to book the last seats on a trip simultaneously.
  Both read remaining=2, both insert a booking, both add 2 to the counter.
  Result: Overbooking.

Solution:
  The trip row is the mutual-exclusion point. Inside one transaction:

  1. SELECT ... FROM trips WHERE public_id = :id ... FOR UPDATE
     (re-read from the database, never from the session identity map)
  2. Check remaining = max_participants - booked_participants
  3. Quote the price, INSERT the booking as 'pending'
  4. UPDATE trips SET booked_participants = booked_participants + :n
     WHERE id = :id AND booked_participants + :n <= max_participants
  5. COMMIT; any failure in 1-4 rolls everything back

  Concurrent bookings on the same trip queue on the row lock and each sees
  the committed count of the one before it, so exactly as many succeed as
  there are seats. Bookings on different trips lock different rows and run
  in parallel. The guarded UPDATE in step 4 keeps the count correct on
  engines that ignore FOR UPDATE, and the CHECK constraints on `trips` are
  the final safety net.

Why not the optimistic version-column retry:
  Under a burst of N requests for K seats, a bounded retry loop can give up
  on requests while seats are still free. A row lock gives exactly-K.
"""

import time
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AlreadyCancelledException,
    CannotCancelCompletedException,
    CapacityExceededException,
    ConflictException,
    DomainException,
    InternalException,
    NotFoundException,
    ValidationException,
)
from app.core.logging import get_logger
from app.core.metrics import booking_latency, record_booking_attempt, record_cancellation
from app.db.session import atomic
from app.models.booking import BookingStatus
from app.services.booking_ledger import BookingLedger
from app.services.trip_service import TripInventory

logger = get_logger(__name__)

ZERO = Decimal("0")


def quote_total(price: Decimal, discount_price: Decimal | None, party_size: int) -> Decimal:
    """
    (price - discount) * party_size, never below zero.
    A discount larger than the price makes the booking free, not negative.
    """
    unit_price = Decimal(price) - Decimal(discount_price or 0)
    total = unit_price * party_size
    return max(total, ZERO).quantize(Decimal("0.01"))


@dataclass(frozen=True)
class BookingReceipt:
    booking_public_id: str
    total_price: Decimal


@dataclass(frozen=True)
class CancellationResult:
    booking_public_id: str
    released_seats: int


class BookingTransactionManager:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.inventory = TripInventory(db)
        self.ledger = BookingLedger(db)

    async def create(self, user_id: int, trip_public_id: str, party_size: int) -> BookingReceipt:
        """Reserve `party_size` seats on a trip as one atomic unit."""
        start = time.perf_counter()
        try:
            receipt = await self._create(user_id, trip_public_id, party_size)
        except ValidationException:
            record_booking_attempt("invalid")
            raise
        except NotFoundException:
            record_booking_attempt("not_found")
            raise
        except ConflictException:
            record_booking_attempt("conflict")
            raise
        except DomainException:
            record_booking_attempt("error")
            raise
        finally:
            booking_latency.observe(time.perf_counter() - start)

        record_booking_attempt("success")
        return receipt

    async def _create(self, user_id: int, trip_public_id: str, party_size: int) -> BookingReceipt:
        if isinstance(party_size, bool) or not isinstance(party_size, int) or party_size < 1:
            raise ValidationException("Number of people must be a positive integer.")

        async with atomic(self.db, "booking"):
            trip = await self.inventory.get_bookable(trip_public_id, lock=True)

            remaining = trip.max_participants - trip.booked_participants
            if party_size > remaining:
                logger.warning(
                    "booking_failed_no_seats",
                    trip_id=trip.id,
                    requested=party_size,
                    remaining=remaining,
                )
                raise CapacityExceededException(max(remaining, 0))

            total = quote_total(trip.price, trip.discount_price, party_size)
            booking = await self.ledger.add(user_id, trip.id, party_size, total)
            await self.inventory.reserve_seats(trip, party_size)

        logger.info(
            "booking_created",
            booking_id=booking.id,
            user_id=user_id,
            trip_id=trip.id,
            seats=party_size,
            total_price=str(total),
            booked_participants=trip.booked_participants,
        )
        return BookingReceipt(booking_public_id=booking.public_id, total_price=total)

    async def cancel(self, user_id: int, booking_public_id: str) -> CancellationResult:
        """Cancel an owned booking and return its seats to the trip."""
        try:
            result = await self._cancel(user_id, booking_public_id)
        except NotFoundException:
            record_cancellation("not_found")
            raise
        except ConflictException:
            record_cancellation("conflict")
            raise
        except DomainException:
            record_cancellation("error")
            raise

        record_cancellation("success", seats=result.released_seats)
        return result

    async def _cancel(self, user_id: int, booking_public_id: str) -> CancellationResult:
        async with atomic(self.db, "booking cancellation"):
            booking = await self.ledger.find_owned(booking_public_id, user_id, lock=True)
            if booking is None:
                raise NotFoundException("Booking not found.")

            # Unreachable given the owner filter above; kept as a second gate
            if booking.user_id != user_id:
                raise NotFoundException("Booking not found.")

            status = BookingStatus(booking.status)
            if status == BookingStatus.CANCELLED:
                raise AlreadyCancelledException()
            if status == BookingStatus.COMPLETED:
                raise CannotCancelCompletedException()

            await self.ledger.transition(booking, BookingStatus.CANCELLED)

            released = await self.inventory.release_seats(booking.trip_id, booking.num_of_people)
            if not released:
                # Ledger and counter disagree; refuse rather than hide the drift
                logger.error(
                    "booking_cancel_counter_drift",
                    booking_id=booking.id,
                    trip_id=booking.trip_id,
                    seats=booking.num_of_people,
                )
                raise InternalException(
                    "Booking could not be cancelled because trip capacity is inconsistent."
                )

        logger.info(
            "booking_cancelled",
            booking_id=booking.id,
            user_id=user_id,
            trip_id=booking.trip_id,
            seats_released=booking.num_of_people,
        )
        return CancellationResult(
            booking_public_id=booking.public_id,
            released_seats=booking.num_of_people,
        )
