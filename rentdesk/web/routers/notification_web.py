from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.database import get_db
from rentdesk.schemas.notification import NotificationOut
from rentdesk.services.notification_service import NotificationService
from rentdesk.web.deps import get_current_user_id

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("")
async def list_notifications(
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Due reminders only; future ones stay hidden until their time."""
    notifications = await NotificationService.list_due(db, user_id)
    return {"data": [NotificationOut.model_validate(n) for n in notifications]}


@router.get("/unread-count")
async def unread_count(
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    count = await NotificationService.unread_count(db, user_id)
    return {"data": {"count": count}}


@router.patch("/read-all")
async def mark_all_as_read(
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    updated = await NotificationService.mark_all_as_read(db, user_id)
    return {"data": {"updated": updated}}


@router.patch("/{notification_id}/read")
async def mark_as_read(
    notification_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    notification = await NotificationService.mark_as_read(db, user_id, notification_id)
    if not notification:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return {"data": NotificationOut.model_validate(notification)}


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    if not await NotificationService.delete_notification(db, user_id, notification_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return {"data": {"id": notification_id, "deleted": True}}


@router.delete("/booking/{booking_id}")
async def delete_booking_notifications(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    deleted = await NotificationService.delete_for_booking(db, user_id, booking_id)
    return {"data": {"booking_id": booking_id, "deleted": deleted}}
