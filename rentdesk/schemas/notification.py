from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from rentdesk.domain.reminders import ReminderKind


class NotificationOut(BaseModel):
    id: int
    booking_id: Optional[int] = None
    kind: ReminderKind
    title: str
    message: str
    is_read: bool
    scheduled_for: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReminderSettingsIn(BaseModel):
    check_in_enabled: bool = True
    check_out_enabled: bool = True
    check_in_lead_hours: float = Field(default=24, ge=0)
    check_out_lead_hours: float = Field(default=24, ge=0)


class ReminderSettingsOut(ReminderSettingsIn):
    rescheduled_bookings: int = 0
