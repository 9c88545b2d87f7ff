"""
Complaint service: customers report problems with a trip for admin follow-up.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationException
from app.core.logging import get_logger
from app.models.complaint import Complaint, ComplaintStatus
from app.services.trip_service import TripInventory

logger = get_logger(__name__)


class ComplaintService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.inventory = TripInventory(db)

    async def submit(self, user_id: int, trip_public_id: str, subject: str, description: str) -> Complaint:
        subject = subject.strip()
        description = description.strip()
        if not subject or not description:
            raise ValidationException("Subject and description are required.")

        trip = await self.inventory.get_visible(trip_public_id)

        complaint = Complaint(
            user_id=user_id,
            trip_id=trip.id,
            subject=subject,
            description=description,
            status=ComplaintStatus.OPEN,
        )
        self.db.add(complaint)
        await self.db.flush()

        logger.info("complaint_submitted", complaint_id=complaint.id, user_id=user_id, trip_id=trip.id)
        return complaint
