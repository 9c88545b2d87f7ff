from app.models.user import User, UserRole, AccountStatus
from app.models.provider import Provider
from app.models.trip import Trip, TripStatus, ApprovalStatus
from app.models.booking import Booking, BookingStatus
from app.models.review import Review
from app.models.complaint import Complaint, ComplaintStatus
from app.models.password_reset import PasswordReset

__all__ = [
    "User", "UserRole", "AccountStatus",
    "Provider",
    "Trip", "TripStatus", "ApprovalStatus",
    "Booking", "BookingStatus",
    "Review",
    "Complaint", "ComplaintStatus",
    "PasswordReset",
]
