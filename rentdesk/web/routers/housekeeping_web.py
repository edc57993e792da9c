from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.database import get_db
from rentdesk.models import Booking, Housekeeping, Property
from rentdesk.schemas.housekeeping import HousekeepingOut, HousekeepingUpdate
from rentdesk.services.housekeeping_service import HousekeepingService
from rentdesk.web.deps import get_current_user_id

router = APIRouter(prefix="/api/housekeeping", tags=["housekeeping"])


def _out(entry: Housekeeping, rental: Property, booking: Booking) -> HousekeepingOut:
    return HousekeepingOut(
        id=entry.id,
        booking_id=booking.id,
        property_id=rental.id,
        property_name=rental.name,
        customer_name=booking.customer_name,
        check_in=booking.check_in,
        check_out=booking.check_out,
        is_clean=entry.is_clean,
        cleaned_by=entry.cleaned_by,
        cleaned_at=entry.cleaned_at,
        verified_by_owner=entry.verified_by_owner,
    )


@router.get("")
async def list_housekeeping(
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    rows = await HousekeepingService.list_for_owner(db, user_id)
    return {"data": [_out(*row) for row in rows]}


@router.patch("/{housekeeping_id}")
async def update_housekeeping(
    housekeeping_id: int,
    update_in: HousekeepingUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    entry = await HousekeepingService.update_status(
        db,
        user_id,
        housekeeping_id,
        is_clean=update_in.is_clean,
        verified_by_owner=update_in.verified_by_owner,
        acting_user_id=user_id,
    )
    rental = await db.get(Property, entry.property_id)
    booking = await db.get(Booking, entry.booking_id)
    return {"data": _out(entry, rental, booking)}
