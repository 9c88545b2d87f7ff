"""
Pydantic schemas for trip listing and detail responses.
"""

from datetime import date, datetime, time
from typing import Optional
from pydantic import AliasChoices, BaseModel, Field

from app.models.trip import TripStatus


class ProviderBrief(BaseModel):
    company_name: str
    company_logo_path: Optional[str] = None

    model_config = {"from_attributes": True}


class ProviderContact(ProviderBrief):
    email: Optional[str] = None
    phone_number: Optional[str] = None


class TripListItem(BaseModel):
    # ORM objects expose public_id; cached pages come back keyed by uuid
    uuid: str = Field(validation_alias=AliasChoices("public_id", "uuid"))
    title: str
    duration: Optional[str]
    location: Optional[str]
    gathering_point_name: Optional[str]
    price: float
    discount_price: float
    max_participants: int
    booked_participants: int
    remaining_seats: int
    start_date: Optional[date]
    provider: ProviderBrief

    model_config = {"from_attributes": True}


class TripDetail(TripListItem):
    description: Optional[str]
    gathering_point_url: Optional[str]
    end_date: Optional[date]
    departure_time: Optional[time]
    return_time: Optional[time]
    status: TripStatus
    created_at: datetime
    updated_at: datetime
    provider: ProviderContact


class TripListResponse(BaseModel):
    trips: list[TripListItem]
    total: int
    page: int
    page_size: int
    cached: bool = False
