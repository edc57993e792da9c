from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.database import get_db
from rentdesk.domain.calendar import get_month_dates, month_markings
from rentdesk.schemas.property import PropertyCreate, PropertyOut, PropertyUpdate
from rentdesk.services.booking_service import BookingService
from rentdesk.services.property_service import PropertyService
from rentdesk.web.deps import get_current_user_id

router = APIRouter(prefix="/api/properties", tags=["properties"])


@router.get("")
async def list_properties(
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    properties = await PropertyService.get_all_properties(db, user_id)
    return {"data": [PropertyOut.model_validate(p) for p in properties]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_property(
    property_in: PropertyCreate,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    rental = await PropertyService.create_property(db, user_id, property_in)
    return {"data": PropertyOut.model_validate(rental)}


@router.get("/{property_id}")
async def get_property(
    property_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    rental = await PropertyService.get_property(db, user_id, property_id)
    return {"data": PropertyOut.model_validate(rental)}


@router.patch("/{property_id}")
async def update_property(
    property_id: int,
    property_in: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    rental = await PropertyService.update_property(db, user_id, property_id, property_in)
    return {"data": PropertyOut.model_validate(rental)}


@router.delete("/{property_id}")
async def delete_property(
    property_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Also removes the property's bookings, housekeeping, invoices and reminders."""
    removed = await PropertyService.delete_property(db, user_id, property_id)
    return {"data": {"id": property_id, "deleted": True, "bookings_removed": removed}}


@router.get("/{property_id}/calendar")
async def property_calendar(
    property_id: int,
    year: Optional[int] = Query(default=None, ge=1970, le=9999),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    Every day of the month, with the booking occupying it (if any).
    """
    today = date.today()
    year = year or today.year
    month = month or today.month

    rental = await BookingService.get_owned_property(db, user_id, property_id)
    bookings = await BookingService.get_bookings_for_property(db, rental.id)
    markings = month_markings(bookings, year, month)

    days = []
    for day in get_month_dates(year, month):
        marking = markings.get(day)
        days.append(
            {
                "date": day,
                "booking_id": marking.booking_id if marking else None,
                "customer_name": marking.customer_name if marking else None,
                "color": marking.color if marking else None,
                "is_check_in": marking.is_check_in if marking else False,
                "is_check_out": marking.is_check_out if marking else False,
            }
        )

    return {"data": {"property_id": rental.id, "year": year, "month": month, "days": days}}
