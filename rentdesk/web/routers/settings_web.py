from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.database import get_db
from rentdesk.domain.reminders import ReminderSettings
from rentdesk.schemas.notification import ReminderSettingsIn, ReminderSettingsOut
from rentdesk.services.booking_service import BookingService
from rentdesk.services.settings_service import SettingsService
from rentdesk.web.deps import get_current_user_id

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("/reminders")
async def get_reminder_settings(
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    reminder_settings = await SettingsService.get_reminder_settings(db, user_id)
    return {"data": ReminderSettingsOut(**asdict(reminder_settings))}


@router.put("/reminders")
async def update_reminder_settings(
    settings_in: ReminderSettingsIn,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    Applies to bookings created or edited from now on. Existing reminders
    are only rescheduled when RESCHEDULE_REMINDERS_ON_SETTINGS_CHANGE is set.
    """
    new_settings = ReminderSettings(**settings_in.model_dump())
    rescheduled = await BookingService.change_reminder_settings(db, user_id, new_settings)
    return {
        "data": ReminderSettingsOut(
            **asdict(new_settings), rescheduled_bookings=rescheduled
        )
    }
