from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.database import get_db
from rentdesk.domain.availability import Conflict
from rentdesk.domain.interval import Interval
from rentdesk.schemas.booking import (
    AvailabilityQuery,
    BookingCreate,
    BookingOut,
    BookingUpdate,
    ConflictOut,
)
from rentdesk.services.booking_service import BookingService
from rentdesk.web.deps import get_current_user_id

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


def conflict_payload(conflict: Conflict) -> ConflictOut:
    return ConflictOut(
        message=conflict.describe(),
        booking=BookingOut.model_validate(conflict.with_booking),
    )


def conflict_response(conflict: Conflict) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=jsonable_encoder(conflict_payload(conflict)),
    )


@router.get("")
async def list_bookings(
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    bookings = await BookingService.get_bookings_for_owner(db, user_id)
    return {"data": [BookingOut.model_validate(b) for b in bookings]}


@router.get("/property/{property_id}")
async def list_property_bookings(
    property_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    rental = await BookingService.get_owned_property(db, user_id, property_id)
    bookings = await BookingService.get_bookings_for_property(db, rental.id)
    return {"data": [BookingOut.model_validate(b) for b in bookings]}


@router.post("/availability")
async def check_availability(
    query: AvailabilityQuery,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    Dry run of the create/edit check. Pass ``exclude_booking_id`` when
    checking new dates for an existing booking.
    """
    rental = await BookingService.get_owned_property(db, user_id, query.property_id)
    result = await BookingService.check_availability(
        db,
        rental.id,
        Interval(query.check_in, query.check_out),
        exclude_booking_id=query.exclude_booking_id,
    )

    if isinstance(result, Conflict):
        return {"data": {"available": False, "conflict": conflict_payload(result)}}
    return {"data": {"available": True, "conflict": None}}


@router.get("/{booking_id}")
async def get_booking(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    booking = await BookingService.get_booking(db, user_id, booking_id)
    return {"data": BookingOut.model_validate(booking)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_in: BookingCreate,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    result = await BookingService.create_booking(db, user_id, booking_in)
    if isinstance(result, Conflict):
        return conflict_response(result)
    return {"data": BookingOut.model_validate(result)}


@router.patch("/{booking_id}")
async def update_booking(
    booking_id: int,
    booking_in: BookingUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    try:
        result = await BookingService.update_booking(db, user_id, booking_id, booking_in)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    if isinstance(result, Conflict):
        return conflict_response(result)
    return {"data": BookingOut.model_validate(result)}


@router.delete("/{booking_id}")
async def delete_booking(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    await BookingService.delete_booking(db, user_id, booking_id)
    return {"data": {"id": booking_id, "deleted": True}}
