"""
Pydantic schemas for complaints.
"""

from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field

from app.models.complaint import ComplaintStatus


class ComplaintCreate(BaseModel):
    trip_uuid: UUID
    subject: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1, max_length=5000)

    model_config = {"str_strip_whitespace": True}


class ComplaintResponse(BaseModel):
    uuid: str = Field(validation_alias="public_id")
    subject: str
    status: ComplaintStatus
    created_at: datetime

    model_config = {"from_attributes": True}
