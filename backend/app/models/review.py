"""
Review model. At most one review per booking, enforced by a unique key.
"""

from sqlalchemy import Column, Integer, String, Text, ForeignKey, Numeric, CheckConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin
from app.models.user import new_public_id


class Review(Base, TimestampMixin):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(String(36), unique=True, index=True, nullable=False, default=new_public_id)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, unique=True)
    rating = Column(Numeric(2, 1), nullable=False)
    comment = Column(Text, nullable=False)

    user = relationship("User")
    trip = relationship("Trip")
    booking = relationship("Booking", back_populates="review")

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="check_review_rating_range"),
    )

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, trip={self.trip_id}, rating={self.rating})>"
