"""
Complaint submission endpoint.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import CurrentUser, customer_or_admin
from app.db.session import get_db
from app.schemas.common import ApiResponse
from app.schemas.complaint import ComplaintCreate, ComplaintResponse
from app.services.complaint_service import ComplaintService

router = APIRouter(prefix="/complaints", tags=["Complaints"])


@router.post("", response_model=ApiResponse[ComplaintResponse], status_code=status.HTTP_201_CREATED)
async def submit_complaint(
    complaint_data: ComplaintCreate,
    current_user: CurrentUser = Depends(customer_or_admin),
    db: AsyncSession = Depends(get_db),
):
    complaint = await ComplaintService(db).submit(
        current_user.id,
        str(complaint_data.trip_uuid),
        complaint_data.subject,
        complaint_data.description,
    )
    return ApiResponse(
        message="Complaint submitted successfully. An admin will review your report shortly.",
        data=ComplaintResponse.model_validate(complaint),
    )
