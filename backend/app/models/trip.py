"""
Trip model with seat inventory tracking.

Key design decisions:
- `booked_participants` is the single source of truth for seats taken; it is
  only ever changed by relative, guarded UPDATEs from the booking transaction
- CHECK constraints keep 0 <= booked_participants <= max_participants even if
  application code misbehaves
- A trip is bookable only when published, approved and not soft-deleted
  (see BOOKABLE in the trip service)
- Index on `location` and `gathering_point_name` backs the search endpoints
"""

import enum

from sqlalchemy import (
    Boolean, Column, Date, ForeignKey, Index, Integer, Numeric, String, Text, Time, CheckConstraint,
)
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin
from app.models.user import enum_column, new_public_id


class TripStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    CLOSED = "closed"


class ApprovalStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Trip(Base, TimestampMixin):
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(String(36), unique=True, index=True, nullable=False, default=new_public_id)
    provider_id = Column(Integer, ForeignKey("providers.id"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(String(50), nullable=True)
    location = Column(String(255), nullable=True)
    gathering_point_name = Column(String(255), nullable=True)
    gathering_point_url = Column(String(500), nullable=True)

    price = Column(Numeric(12, 2), nullable=False)
    discount_price = Column(Numeric(12, 2), nullable=False, default=0)

    max_participants = Column(Integer, nullable=False)
    booked_participants = Column(Integer, nullable=False, default=0)

    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    departure_time = Column(Time, nullable=True)
    return_time = Column(Time, nullable=True)

    status = Column(enum_column(TripStatus), nullable=False, default=TripStatus.DRAFT)
    approval_status = Column(enum_column(ApprovalStatus), nullable=False, default=ApprovalStatus.PENDING)
    is_deleted = Column(Boolean, nullable=False, default=False)

    # Relationships
    provider = relationship("Provider", back_populates="trips")
    bookings = relationship("Booking", back_populates="trip")

    __table_args__ = (
        CheckConstraint("booked_participants >= 0", name="check_booked_participants_non_negative"),
        CheckConstraint("max_participants > 0", name="check_max_participants_positive"),
        CheckConstraint("booked_participants <= max_participants", name="check_booked_lte_max"),
        CheckConstraint("price >= 0", name="check_price_non_negative"),
        CheckConstraint("discount_price >= 0", name="check_discount_price_non_negative"),
        Index("ix_trips_location", "location"),
        Index("ix_trips_gathering_point_name", "gathering_point_name"),
        Index("ix_trips_bookable", "status", "approval_status", "is_deleted"),
    )

    @property
    def remaining_seats(self) -> int:
        return self.max_participants - self.booked_participants

    def __repr__(self) -> str:
        return f"<Trip(id={self.id}, title={self.title}, booked={self.booked_participants}/{self.max_participants})>"
