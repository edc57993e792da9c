import logging
from datetime import datetime, timezone
from typing import List, Optional
from zoneinfo import ZoneInfo

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.config import settings
from rentdesk.domain.lifecycle import LifecyclePlan, ReminderLifecycleManager
from rentdesk.models import Notification

logger = logging.getLogger(__name__)


def to_naive_utc(moment: datetime) -> datetime:
    """Storage format for instants: UTC without tzinfo."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _due_filter(now: datetime):
    return or_(
        Notification.scheduled_for.is_(None),
        Notification.scheduled_for <= to_naive_utc(now),
    )


class NotificationService:
    """Persistence of reminder plans and the notification inbox."""

    @staticmethod
    async def apply_plan(
        db: AsyncSession, user_id: int, plan: LifecyclePlan
    ) -> List[Notification]:
        """
        Retire-then-write in the caller's transaction.
        The caller commits; nothing is committed here.

        A rewritten reminder that is already due keeps the delivery state of
        the retired reminder of the same kind, so it is not pushed twice.
        """
        delivered = {}
        if plan.retire:
            previous = await db.execute(
                select(Notification).where(
                    Notification.booking_id == plan.booking_id,
                    Notification.dispatched_at.is_not(None),
                )
            )
            delivered = {
                n.kind: (n.dispatched_at, n.is_read) for n in previous.scalars().all()
            }

            result = await db.execute(
                delete(Notification).where(Notification.booking_id == plan.booking_id)
            )
            if result.rowcount:
                logger.info(
                    f"Retired {result.rowcount} reminders of booking #{plan.booking_id}"
                )

        created = []
        for draft in plan.writes:
            notification = Notification(
                user_id=user_id,
                booking_id=draft.booking_id,
                kind=draft.kind,
                title=draft.title,
                message=draft.message,
                scheduled_for=to_naive_utc(draft.scheduled_for),
                is_read=False,
            )
            if draft.already_due and draft.kind in delivered:
                notification.dispatched_at, notification.is_read = delivered[draft.kind]
            db.add(notification)
            created.append(notification)

        await db.flush()
        return created

    @staticmethod
    async def get_for_booking(db: AsyncSession, booking_id: int) -> List[Notification]:
        result = await db.execute(
            select(Notification)
            .where(Notification.booking_id == booking_id)
            .order_by(Notification.scheduled_for)
        )
        return list(result.scalars().all())

    @staticmethod
    async def list_due(
        db: AsyncSession, user_id: int, now: Optional[datetime] = None
    ) -> List[Notification]:
        """Inbox: reminders whose time has come, newest first."""
        now = now or utc_now()
        result = await db.execute(
            select(Notification)
            .where(Notification.user_id == user_id, _due_filter(now))
            .order_by(Notification.created_at.desc(), Notification.id.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def unread_count(
        db: AsyncSession, user_id: int, now: Optional[datetime] = None
    ) -> int:
        now = now or utc_now()
        result = await db.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
                _due_filter(now),
            )
        )
        return result.scalar_one()

    @staticmethod
    async def mark_as_read(
        db: AsyncSession, user_id: int, notification_id: int
    ) -> Optional[Notification]:
        notification = await db.get(Notification, notification_id)
        if not notification or notification.user_id != user_id:
            return None
        notification.is_read = True
        await db.commit()
        return notification

    @staticmethod
    async def mark_all_as_read(db: AsyncSession, user_id: int) -> int:
        result = await db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True)
        )
        await db.commit()
        return result.rowcount

    @staticmethod
    async def delete_notification(
        db: AsyncSession, user_id: int, notification_id: int
    ) -> bool:
        result = await db.execute(
            delete(Notification).where(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
        )
        await db.commit()
        return result.rowcount > 0

    @staticmethod
    async def delete_for_booking(db: AsyncSession, user_id: int, booking_id: int) -> int:
        """Clear a booking's reminders from the user's inbox; other users' rows stay."""
        result = await db.execute(
            delete(Notification).where(
                Notification.booking_id == booking_id,
                Notification.user_id == user_id,
            )
        )
        await db.commit()
        if result.rowcount:
            logger.info(f"Deleted {result.rowcount} reminders of booking #{booking_id}")
        return result.rowcount

    @staticmethod
    async def get_undispatched_due(
        db: AsyncSession, now: Optional[datetime] = None
    ) -> List[Notification]:
        now = now or utc_now()
        result = await db.execute(
            select(Notification)
            .where(
                Notification.dispatched_at.is_(None),
                Notification.scheduled_for.is_not(None),
                Notification.scheduled_for <= to_naive_utc(now),
            )
            .order_by(Notification.scheduled_for)
        )
        return list(result.scalars().all())


reminder_lifecycle = ReminderLifecycleManager(tz=ZoneInfo(settings.business_timezone))
