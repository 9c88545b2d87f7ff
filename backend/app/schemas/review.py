"""
Pydantic schemas for trip reviews.
"""

from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field


class ReviewCreate(BaseModel):
    trip_uuid: UUID
    rating: float = Field(..., ge=1, le=5)
    comment: str = Field(..., min_length=1, max_length=2000)

    model_config = {"str_strip_whitespace": True}


class Reviewer(BaseModel):
    name: str


class ReviewCreated(BaseModel):
    uuid: str
    rating: float
    comment: str
    created_at: datetime


class ReviewResponse(ReviewCreated):
    user: Reviewer
