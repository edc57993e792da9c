"""
Reminder policy: when a check-in / check-out reminder becomes due and what it says.

Everything here is a pure function of its arguments. Reminder settings and
the current instant are always passed in explicitly.
"""
import datetime
from dataclasses import dataclass
from enum import Enum
from typing import Optional

UTC = datetime.timezone.utc


class ReminderKind(str, Enum):
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


DEFAULT_TIMES = {
    ReminderKind.CHECK_IN: datetime.time(14, 0),
    ReminderKind.CHECK_OUT: datetime.time(11, 0),
}

TITLES = {
    ReminderKind.CHECK_IN: "📅 Upcoming Check-in",
    ReminderKind.CHECK_OUT: "🏁 Upcoming Check-out",
}


@dataclass(frozen=True)
class ReminderSettings:
    check_in_enabled: bool = True
    check_out_enabled: bool = True
    check_in_lead_hours: float = 24.0
    check_out_lead_hours: float = 24.0

    def is_enabled(self, kind: ReminderKind) -> bool:
        if kind == ReminderKind.CHECK_IN:
            return self.check_in_enabled
        return self.check_out_enabled

    def lead_hours(self, kind: ReminderKind) -> float:
        if kind == ReminderKind.CHECK_IN:
            return self.check_in_lead_hours
        return self.check_out_lead_hours


@dataclass(frozen=True)
class BookingSnapshot:
    """The booking fields reminder text and timing depend on."""

    id: int
    property_id: int
    property_name: str
    customer_name: str
    check_in: datetime.date
    check_out: datetime.date
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None

    def date_for(self, kind: ReminderKind) -> datetime.date:
        return self.check_in if kind == ReminderKind.CHECK_IN else self.check_out

    def time_for(self, kind: ReminderKind) -> Optional[datetime.time]:
        raw = self.check_in_time if kind == ReminderKind.CHECK_IN else self.check_out_time
        return parse_clock_time(raw)


@dataclass(frozen=True)
class Future:
    scheduled_for: datetime.datetime


@dataclass(frozen=True)
class AlreadyDue:
    scheduled_for: datetime.datetime


@dataclass(frozen=True)
class Suppressed:
    pass


ReminderPlan = Future | AlreadyDue | Suppressed


@dataclass(frozen=True)
class ReminderDraft:
    """A reminder ready to be persisted."""

    booking_id: int
    kind: ReminderKind
    scheduled_for: datetime.datetime
    title: str
    message: str
    already_due: bool


def parse_clock_time(value: str | datetime.time | None) -> Optional[datetime.time]:
    """'14:00' / '14:00:00' -> time; empty -> None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime.time):
        return value
    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid time of day: {value!r}")
    hour, minute = int(parts[0]), int(parts[1])
    second = int(parts[2]) if len(parts) == 3 else 0
    return datetime.time(hour, minute, second)


def format_clock(value: datetime.time) -> str:
    """12-hour clock: 14:00 -> '2:00 PM'."""
    suffix = "PM" if value.hour >= 12 else "AM"
    hour = value.hour % 12 or 12
    return f"{hour}:{value.minute:02d} {suffix}"


def format_day(day: datetime.date) -> str:
    """'Mon, Jun 10'"""
    return f"{day:%a}, {day:%b} {day.day}"


def _as_utc(moment: datetime.datetime) -> datetime.datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def local_date(moment: datetime.datetime, tz: datetime.tzinfo = UTC) -> datetime.date:
    """Calendar day of ``moment`` in the business timezone; naive means UTC."""
    return _as_utc(moment).astimezone(tz).date()


def compute_reminder(
    kind: ReminderKind,
    booking_date: datetime.date,
    booking_time: Optional[datetime.time],
    lead_hours: float,
    now: datetime.datetime,
    tz: datetime.tzinfo = UTC,
) -> Future | AlreadyDue:
    """
    Instant at which a reminder is due: the booking's local date and time
    (default for the kind when unset) minus ``lead_hours``.

    A reminder that is already in the past is still returned, as
    ``AlreadyDue``, so it shows up in the inbox right away.
    """
    local_time = booking_time or DEFAULT_TIMES[kind]
    local_moment = datetime.datetime.combine(booking_date, local_time, tzinfo=tz)
    scheduled_for = local_moment.astimezone(UTC) - datetime.timedelta(hours=lead_hours)

    if scheduled_for > _as_utc(now):
        return Future(scheduled_for)
    return AlreadyDue(scheduled_for)


def plan_reminder(
    kind: ReminderKind,
    booking: BookingSnapshot,
    settings: ReminderSettings,
    now: datetime.datetime,
    tz: datetime.tzinfo = UTC,
) -> ReminderPlan:
    if not settings.is_enabled(kind):
        return Suppressed()
    return compute_reminder(
        kind,
        booking.date_for(kind),
        booking.time_for(kind),
        settings.lead_hours(kind),
        now,
        tz,
    )


def reminder_message(kind: ReminderKind, booking: BookingSnapshot) -> str:
    local_time = booking.time_for(kind) or DEFAULT_TIMES[kind]
    when = f"{format_day(booking.date_for(kind))} at {format_clock(local_time)}"
    if kind == ReminderKind.CHECK_IN:
        return f"{booking.customer_name} is checking in to {booking.property_name} on {when}"
    return f"{booking.customer_name} is checking out from {booking.property_name} on {when}"


def build_reminder(
    kind: ReminderKind,
    booking: BookingSnapshot,
    settings: ReminderSettings,
    now: datetime.datetime,
    tz: datetime.tzinfo = UTC,
) -> Optional[ReminderDraft]:
    """Reminder to persist for ``kind``, or None when the kind is disabled."""
    plan = plan_reminder(kind, booking, settings, now, tz)
    if isinstance(plan, Suppressed):
        return None
    return ReminderDraft(
        booking_id=booking.id,
        kind=kind,
        scheduled_for=plan.scheduled_for,
        title=TITLES[kind],
        message=reminder_message(kind, booking),
        already_due=isinstance(plan, AlreadyDue),
    )
