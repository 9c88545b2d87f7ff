"""
Complaint model: a customer's report about a trip, reviewed by admins.
"""

import enum

from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin
from app.models.user import enum_column, new_public_id


class ComplaintStatus(str, enum.Enum):
    OPEN = "open"
    RESOLVED = "resolved"


class Complaint(Base, TimestampMixin):
    __tablename__ = "complaints"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(String(36), unique=True, index=True, nullable=False, default=new_public_id)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    subject = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(enum_column(ComplaintStatus), nullable=False, default=ComplaintStatus.OPEN)

    user = relationship("User")
    trip = relationship("Trip")

    def __repr__(self) -> str:
        return f"<Complaint(id={self.id}, trip={self.trip_id}, status={self.status})>"
