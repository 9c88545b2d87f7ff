"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from app.api.routes import auth, trips, bookings, reviews, complaints
from app.schemas.common import ErrorResponse

# Every failure is rendered in the same envelope; advertise it in the docs
ERROR_RESPONSES = {code: {"model": ErrorResponse} for code in (400, 401, 403, 404, 409, 500)}

api_router = APIRouter(prefix="/api/v1", responses=ERROR_RESPONSES)
api_router.include_router(auth.router)
api_router.include_router(trips.router)
api_router.include_router(bookings.router)
api_router.include_router(reviews.router)
api_router.include_router(complaints.router)
