"""
Public trip endpoints with Redis caching on the listing.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationException
from app.core.logging import get_logger
from app.db.session import get_db
from app.schemas.common import ApiResponse
from app.schemas.review import Reviewer, ReviewResponse
from app.schemas.trip import TripDetail, TripListItem, TripListResponse
from app.services.cache_service import get_cached_trips, set_cached_trips
from app.services.review_service import ReviewService
from app.services.trip_service import TripInventory

logger = get_logger(__name__)
router = APIRouter(prefix="/trips", tags=["Trips"])


def get_inventory(db: AsyncSession = Depends(get_db)) -> TripInventory:
    return TripInventory(db)


def _require_keyword(value: str, name: str) -> str:
    keyword = value.strip()
    if not keyword:
        raise ValidationException(f"Query parameter '{name}' is required.")
    return keyword


@router.get("", response_model=ApiResponse[TripListResponse])
async def list_trips(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    inventory: TripInventory = Depends(get_inventory),
):
    """
    List bookable trips with pagination.
    Pages are cached in Redis and invalidated whenever seats are booked or released.
    """
    cached = await get_cached_trips(page, page_size)
    if cached:
        logger.info("trips_list_cache_hit", page=page)
        cached["cached"] = True
        return ApiResponse(data=TripListResponse(**cached))

    trips, total = await inventory.list_trips(page, page_size)
    response_data = TripListResponse(
        trips=[TripListItem.model_validate(t) for t in trips],
        total=total,
        page=page,
        page_size=page_size,
    )
    await set_cached_trips(page, page_size, response_data.model_dump(mode="json"))
    return ApiResponse(data=response_data)


@router.get("/search", response_model=ApiResponse[list[TripListItem]])
async def search_trips_by_location(
    location: str = Query(..., max_length=255),
    inventory: TripInventory = Depends(get_inventory),
):
    keyword = _require_keyword(location, "location")
    trips = await inventory.search_by_location(keyword)
    return ApiResponse(data=[TripListItem.model_validate(t) for t in trips])


@router.get("/search/gathering-point", response_model=ApiResponse[list[TripListItem]])
async def search_trips_by_gathering_point(
    q: str = Query(..., max_length=255),
    inventory: TripInventory = Depends(get_inventory),
):
    keyword = _require_keyword(q, "q")
    trips = await inventory.search_by_gathering_point(keyword)
    return ApiResponse(data=[TripListItem.model_validate(t) for t in trips])


@router.get("/{trip_uuid}", response_model=ApiResponse[TripDetail])
async def get_trip_detail(trip_uuid: UUID, inventory: TripInventory = Depends(get_inventory)):
    """Single trip. Not cached (shows real-time remaining seats)."""
    trip = await inventory.get_detail(str(trip_uuid))
    return ApiResponse(data=TripDetail.model_validate(trip))


@router.get("/{trip_uuid}/reviews", response_model=ApiResponse[list[ReviewResponse]])
async def list_trip_reviews(trip_uuid: UUID, db: AsyncSession = Depends(get_db)):
    reviews = await ReviewService(db).list_for_trip(str(trip_uuid))
    return ApiResponse(
        data=[
            ReviewResponse(
                uuid=r.public_id,
                rating=float(r.rating),
                comment=r.comment,
                created_at=r.created_at,
                user=Reviewer(name=r.user.name),
            )
            for r in reviews
        ]
    )
