"""
Booking endpoints with concurrency-safe seat reservation.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import CurrentUser, customer_only, customer_or_admin
from app.db.session import get_db
from app.schemas.booking import (
    BookingCancelResponse,
    BookingCreate,
    BookingDetail,
    BookingReceiptResponse,
    BookingSummary,
    PaymentDetails,
)
from app.schemas.common import ApiResponse
from app.models.booking import BookingStatus
from app.services.booking_ledger import BookingLedger
from app.services.booking_service import BookingTransactionManager
from app.services.cache_service import invalidate_trip_cache

router = APIRouter(prefix="/booking", tags=["Bookings"])


def get_booking_manager(db: AsyncSession = Depends(get_db)) -> BookingTransactionManager:
    return BookingTransactionManager(db)


def get_booking_ledger(db: AsyncSession = Depends(get_db)) -> BookingLedger:
    return BookingLedger(db)


@router.post("", response_model=ApiResponse[BookingReceiptResponse], status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    current_user: CurrentUser = Depends(customer_or_admin),
    manager: BookingTransactionManager = Depends(get_booking_manager),
):
    """
    Book seats on a trip.

    The trip row is locked for the duration of the transaction, so concurrent
    requests for the last seats are served one at a time; the losers get 409.
    """
    receipt = await manager.create(current_user.id, str(booking_data.trip_id), booking_data.num_of_people)
    # Remaining seats changed; listing pages are stale
    await invalidate_trip_cache()
    return ApiResponse(
        message="Booking created successfully.",
        data=BookingReceiptResponse(
            booking_uuid=receipt.booking_public_id,
            total_price=receipt.total_price,
        ),
    )


@router.put("/cancel/{booking_uuid}", response_model=ApiResponse[BookingCancelResponse])
async def cancel_booking(
    booking_uuid: UUID,
    current_user: CurrentUser = Depends(customer_or_admin),
    manager: BookingTransactionManager = Depends(get_booking_manager),
):
    """Cancel a booking and release its seats back to the trip."""
    result = await manager.cancel(current_user.id, str(booking_uuid))
    await invalidate_trip_cache()
    return ApiResponse(
        message=f"Booking cancelled. {result.released_seats} seat(s) released.",
        data=BookingCancelResponse(
            booking_uuid=result.booking_public_id,
            status=BookingStatus.CANCELLED,
            released_seats=result.released_seats,
        ),
    )


@router.get("", response_model=ApiResponse[list[BookingSummary]])
async def list_user_bookings(
    current_user: CurrentUser = Depends(customer_only),
    ledger: BookingLedger = Depends(get_booking_ledger),
):
    """Booking history of the authenticated user."""
    bookings = await ledger.list_for_user(current_user.id)
    return ApiResponse(data=[BookingSummary.from_booking(b) for b in bookings])


@router.get("/{booking_uuid}", response_model=ApiResponse[BookingDetail])
async def get_booking_detail(
    booking_uuid: UUID,
    current_user: CurrentUser = Depends(customer_or_admin),
    ledger: BookingLedger = Depends(get_booking_ledger),
):
    booking = await ledger.get_detail(str(booking_uuid), current_user.id)
    return ApiResponse(data=BookingDetail.from_booking(booking))


@router.get("/{booking_uuid}/payment-details", response_model=ApiResponse[PaymentDetails])
async def get_payment_details(
    booking_uuid: UUID,
    current_user: CurrentUser = Depends(customer_or_admin),
    ledger: BookingLedger = Depends(get_booking_ledger),
):
    """Billing breakdown and the provider's bank transfer details."""
    booking = await ledger.get_detail(str(booking_uuid), current_user.id)
    return ApiResponse(data=PaymentDetails.from_booking(booking))
