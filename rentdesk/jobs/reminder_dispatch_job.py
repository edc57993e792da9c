"""
Periodic hand-off of due reminders to the notification sink.
"""
import logging
from datetime import datetime
from typing import Awaitable, Callable, Optional

from rentdesk.models import Notification
from rentdesk.services.notification_service import (
    NotificationService,
    to_naive_utc,
    utc_now,
)

logger = logging.getLogger(__name__)

NotificationSink = Callable[[Notification], Awaitable[None]]


async def log_sink(notification: Notification) -> None:
    """Default sink: push transport lives outside this service."""
    logger.info(
        f"🔔 Reminder #{notification.id} for user {notification.user_id}: "
        f"{notification.title} - {notification.message}"
    )


_sink: NotificationSink = log_sink


def set_notification_sink(sink: NotificationSink) -> None:
    global _sink
    _sink = sink


async def dispatch_due_reminders(
    session, sink: Optional[NotificationSink] = None, now: Optional[datetime] = None
) -> int:
    """
    Send every due, not yet dispatched reminder through the sink.
    A failing send is logged and retried on the next run.
    """
    sink = sink or _sink
    now = now or utc_now()

    due = await NotificationService.get_undispatched_due(session, now)
    sent = 0
    for notification in due:
        try:
            await sink(notification)
        except Exception as e:
            logger.error(f"Failed to dispatch reminder #{notification.id}: {e}")
            continue
        notification.dispatched_at = to_naive_utc(now)
        sent += 1

    await session.commit()
    return sent


async def dispatch_due_reminders_job():
    """Scheduler entry point."""
    try:
        from rentdesk.database import AsyncSessionLocal

        async with AsyncSessionLocal() as session:
            sent = await dispatch_due_reminders(session)

        if sent:
            logger.info(f"✅ Dispatched {sent} due reminders")
    except Exception as e:
        logger.error(f"❌ Reminder dispatch job failed: {e}", exc_info=True)
