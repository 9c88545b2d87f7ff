"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field

from app.models.booking import Booking, BookingStatus


class BookingCreate(BaseModel):
    trip_id: UUID = Field(..., description="Public identifier of the trip")
    # Strict so JSON booleans are not coerced to 1
    num_of_people: int = Field(..., ge=1, strict=True)


class BookingReceiptResponse(BaseModel):
    booking_uuid: str
    total_price: float


class BookingCancelResponse(BaseModel):
    booking_uuid: str
    status: BookingStatus
    released_seats: int


class TripSummary(BaseModel):
    uuid: str
    title: str
    location: Optional[str]
    start_date: Optional[date]
    departure_time: Optional[time]


class BookingSummary(BaseModel):
    booking_uuid: str
    total_price: float
    num_of_people: int
    booking_status: BookingStatus
    booking_date: datetime
    trip: TripSummary
    provider_name: str

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingSummary":
        trip = booking.trip
        return cls(
            booking_uuid=booking.public_id,
            total_price=booking.total_price,
            num_of_people=booking.num_of_people,
            booking_status=booking.status,
            booking_date=booking.created_at,
            trip=TripSummary(
                uuid=trip.public_id,
                title=trip.title,
                location=trip.location,
                start_date=trip.start_date,
                departure_time=trip.departure_time,
            ),
            provider_name=trip.provider.company_name,
        )


class BankTransferInfo(BaseModel):
    bank_name: Optional[str]
    account_number: Optional[str]
    account_name: Optional[str]


class ProviderDetail(BaseModel):
    company_name: str
    phone_number: Optional[str]
    company_logo_path: Optional[str]
    bank_transfer: BankTransferInfo


class TripDetailForBooking(TripSummary):
    description: Optional[str]
    duration: Optional[str]
    gathering_point_name: Optional[str]
    gathering_point_url: Optional[str]
    price: float
    discount_price: float
    end_date: Optional[date]
    return_time: Optional[time]


class BookingDetail(BaseModel):
    booking_uuid: str
    total_price: float
    num_of_people: int
    booking_status: BookingStatus
    booking_date: datetime
    trip: TripDetailForBooking
    provider: ProviderDetail

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingDetail":
        trip = booking.trip
        provider = trip.provider
        return cls(
            booking_uuid=booking.public_id,
            total_price=booking.total_price,
            num_of_people=booking.num_of_people,
            booking_status=booking.status,
            booking_date=booking.created_at,
            trip=TripDetailForBooking(
                uuid=trip.public_id,
                title=trip.title,
                description=trip.description,
                duration=trip.duration,
                location=trip.location,
                gathering_point_name=trip.gathering_point_name,
                gathering_point_url=trip.gathering_point_url,
                price=trip.price,
                discount_price=trip.discount_price,
                start_date=trip.start_date,
                end_date=trip.end_date,
                departure_time=trip.departure_time,
                return_time=trip.return_time,
            ),
            provider=ProviderDetail(
                company_name=provider.company_name,
                phone_number=provider.phone_number,
                company_logo_path=provider.company_logo_path,
                bank_transfer=BankTransferInfo(
                    bank_name=provider.bank_name,
                    account_number=provider.bank_account_number,
                    account_name=provider.bank_account_name,
                ),
            ),
        )


class PaymentDetails(BaseModel):
    """Billing breakdown plus where to send the bank transfer."""

    booking_uuid: str
    booking_status: BookingStatus
    booking_date: datetime
    trip_title: str
    num_of_people: int
    original_price: float
    discount_price: float
    unit_price: float
    total_price: float
    payment_method: str = "bank_transfer"
    provider_name: str
    bank_transfer: BankTransferInfo

    @classmethod
    def from_booking(cls, booking: Booking) -> "PaymentDetails":
        trip = booking.trip
        provider = trip.provider
        # Derived from the locked total, not from the trip's current price
        unit_price = booking.total_price / Decimal(booking.num_of_people)
        return cls(
            booking_uuid=booking.public_id,
            booking_status=booking.status,
            booking_date=booking.created_at,
            trip_title=trip.title,
            num_of_people=booking.num_of_people,
            original_price=trip.price,
            discount_price=trip.discount_price,
            unit_price=round(unit_price, 2),
            total_price=booking.total_price,
            provider_name=provider.company_name,
            bank_transfer=BankTransferInfo(
                bank_name=provider.bank_name,
                account_number=provider.bank_account_number,
                account_name=provider.bank_account_name,
            ),
        )
