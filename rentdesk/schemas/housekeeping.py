from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel


class HousekeepingOut(BaseModel):
    id: int
    booking_id: int
    property_id: int
    property_name: str
    customer_name: str
    check_in: date
    check_out: date
    is_clean: bool
    cleaned_by: Optional[int] = None
    cleaned_at: Optional[datetime] = None
    verified_by_owner: bool


class HousekeepingUpdate(BaseModel):
    is_clean: Optional[bool] = None
    verified_by_owner: Optional[bool] = None
