from dataclasses import asdict
from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.config import settings
from rentdesk.database import get_db
from rentdesk.domain.reports import revenue_summary
from rentdesk.services.booking_service import BookingService
from rentdesk.services.property_service import PropertyService
from rentdesk.web.deps import get_current_user_id

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/summary")
async def summary(
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    properties = await PropertyService.get_all_properties(db, user_id)
    bookings = await BookingService.get_bookings_for_owner(db, user_id)
    today = datetime.now(ZoneInfo(settings.business_timezone)).date()
    return {"data": asdict(revenue_summary(properties, bookings, today))}
