from app.schemas.common import ApiResponse, ErrorResponse
from app.schemas.user import UserCreate, UserResponse, UserLogin, Token
from app.schemas.trip import TripListItem, TripDetail, TripListResponse
from app.schemas.booking import BookingCreate, BookingReceiptResponse, BookingSummary, BookingDetail

__all__ = [
    "ApiResponse", "ErrorResponse",
    "UserCreate", "UserResponse", "UserLogin", "Token",
    "TripListItem", "TripDetail", "TripListResponse",
    "BookingCreate", "BookingReceiptResponse", "BookingSummary", "BookingDetail",
]
