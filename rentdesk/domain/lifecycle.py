"""
Reminder lifecycle per booking: NO_REMINDERS -> SCHEDULED -> RETIRED.

The manager never touches storage. Every event returns a ``LifecyclePlan``
that the caller applies in one transaction: first retire the booking's live
reminders (when ``retire`` is set), then persist ``writes``.
"""
import datetime
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from rentdesk.domain.reminders import (
    UTC,
    BookingSnapshot,
    ReminderDraft,
    ReminderKind,
    ReminderSettings,
    build_reminder,
    local_date,
)

logger = logging.getLogger(__name__)

# Booking fields the reminder schedule or text is derived from
REMINDER_FIELDS = frozenset(
    {
        "check_in",
        "check_out",
        "check_in_time",
        "check_out_time",
        "customer_name",
        "property_id",
    }
)


class ReminderState(str, Enum):
    NO_REMINDERS = "no_reminders"
    SCHEDULED = "scheduled"
    RETIRED = "retired"


@dataclass
class LifecyclePlan:
    booking_id: int
    retire: bool = False
    writes: list[ReminderDraft] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.retire and not self.writes

    @property
    def due_now(self) -> list[ReminderDraft]:
        return [w for w in self.writes if w.already_due]

    @property
    def future(self) -> list[ReminderDraft]:
        return [w for w in self.writes if not w.already_due]


class ReminderLifecycleManager:
    """
    Turns booking events into reminder retirements and writes.

    Only scheduled bookings are tracked. Retired ids are remembered in a
    bounded window so a repeated delete stays a no-op; past the window a
    repeated delete degrades to a retire of zero rows, which leaves the
    store unchanged.
    """

    def __init__(self, tz: datetime.tzinfo = UTC, retired_window: int = 1024):
        self.tz = tz
        self.retired_window = retired_window
        self._scheduled: set[int] = set()
        self._retired: OrderedDict[int, None] = OrderedDict()

    def state_of(self, booking_id: int) -> ReminderState:
        if booking_id in self._retired:
            return ReminderState.RETIRED
        if booking_id in self._scheduled:
            return ReminderState.SCHEDULED
        return ReminderState.NO_REMINDERS

    def tracked_count(self) -> int:
        return len(self._scheduled) + len(self._retired)

    def forget(self, booking_id: int) -> None:
        """Drop tracked state after a plan failed to apply; the next event recomputes."""
        self._scheduled.discard(booking_id)
        self._retired.pop(booking_id, None)

    def _retire(self, booking_id: int) -> None:
        self._scheduled.discard(booking_id)
        self._retired[booking_id] = None
        while len(self._retired) > self.retired_window:
            self._retired.popitem(last=False)

    def _compute(
        self,
        booking: BookingSnapshot,
        settings: ReminderSettings,
        now: datetime.datetime,
    ) -> list[ReminderDraft]:
        writes = []
        for kind in ReminderKind:
            draft = build_reminder(kind, booking, settings, now, self.tz)
            if draft is not None:
                writes.append(draft)
        return writes

    def on_booking_created(
        self,
        booking: BookingSnapshot,
        settings: ReminderSettings,
        now: datetime.datetime,
    ) -> LifecyclePlan:
        state = self.state_of(booking.id)
        if state == ReminderState.RETIRED:
            logger.warning(f"Booking #{booking.id} is retired, no reminders planned")
            return LifecyclePlan(booking_id=booking.id)

        # A repeated create replaces the live set instead of adding to it
        plan = LifecyclePlan(
            booking_id=booking.id,
            retire=state == ReminderState.SCHEDULED,
            writes=self._compute(booking, settings, now),
        )
        self._scheduled.add(booking.id)
        logger.info(
            f"Booking #{booking.id}: {len(plan.future)} future and "
            f"{len(plan.due_now)} already-due reminders planned"
        )
        return plan

    def on_booking_updated(
        self,
        booking: BookingSnapshot,
        settings: ReminderSettings,
        now: datetime.datetime,
        changed_fields: Optional[Iterable[str]] = None,
    ) -> LifecyclePlan:
        """Retire everything and recompute; never patch individual reminders."""
        if self.state_of(booking.id) == ReminderState.RETIRED:
            return LifecyclePlan(booking_id=booking.id)

        if changed_fields is not None and not REMINDER_FIELDS & set(changed_fields):
            return LifecyclePlan(booking_id=booking.id)

        plan = LifecyclePlan(
            booking_id=booking.id,
            retire=True,
            writes=self._compute(booking, settings, now),
        )
        self._scheduled.add(booking.id)
        return plan

    def on_booking_deleted(self, booking_id: int) -> LifecyclePlan:
        if self.state_of(booking_id) == ReminderState.RETIRED:
            return LifecyclePlan(booking_id=booking_id)

        self._retire(booking_id)
        return LifecyclePlan(booking_id=booking_id, retire=True)

    def on_settings_changed(
        self,
        new_settings: ReminderSettings,
        bookings: Iterable[BookingSnapshot],
        now: datetime.datetime,
        reschedule: bool = False,
    ) -> list[LifecyclePlan]:
        """
        Existing reminders are left as they are unless ``reschedule`` is set,
        in which case every booking whose stay has not ended is recomputed
        with ``new_settings``. Finished stays keep the reminders they had.
        """
        if not reschedule:
            return []
        today = local_date(now, self.tz)
        plans = [
            self.on_booking_updated(b, new_settings, now)
            for b in bookings
            if b.check_out >= today
        ]
        return [p for p in plans if not p.is_empty]
