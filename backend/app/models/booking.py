"""
Booking model representing a customer's reservation on a trip.

Key design decisions:
- `num_of_people` and `total_price` are fixed at creation; the price is a
  point-in-time quote and is never recomputed from the trip
- Status is a closed enumeration; legal moves live in BOOKING_TRANSITIONS
  rather than in ad-hoc string comparisons
- Status field allows cancellation without deleting records
"""

import enum

from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, CheckConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin
from app.models.user import enum_column, new_public_id


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


BOOKING_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset(
        {BookingStatus.PAID, BookingStatus.CANCELLED, BookingStatus.COMPLETED}
    ),
    BookingStatus.PAID: frozenset(
        {BookingStatus.CONFIRMED, BookingStatus.CANCELLED, BookingStatus.COMPLETED}
    ),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.CANCELLED, BookingStatus.COMPLETED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return target in BOOKING_TRANSITIONS[current]


def is_terminal(status: BookingStatus) -> bool:
    return not BOOKING_TRANSITIONS[status]


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(String(36), unique=True, index=True, nullable=False, default=new_public_id)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    num_of_people = Column(Integer, nullable=False)
    total_price = Column(Numeric(14, 2), nullable=False)
    status = Column(enum_column(BookingStatus), nullable=False, default=BookingStatus.PENDING)

    # Relationships
    user = relationship("User", back_populates="bookings")
    trip = relationship("Trip", back_populates="bookings")
    review = relationship("Review", back_populates="booking", uselist=False)

    __table_args__ = (
        CheckConstraint("num_of_people > 0", name="check_booking_num_of_people_positive"),
        CheckConstraint("total_price >= 0", name="check_booking_total_price_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, user={self.user_id}, trip={self.trip_id}, status={self.status})>"
