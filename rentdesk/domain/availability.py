"""
Availability checks over a property's bookings.

Bookings are duck-typed: anything with ``id``, ``property_id``,
``check_in`` and ``check_out`` works, so both ORM rows and plain snapshots
can be checked without a database.
"""
import datetime
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from rentdesk.domain.interval import Interval, contains, overlaps


def interval_of(booking: Any) -> Interval:
    return Interval(booking.check_in, booking.check_out)


def _display_date(day: datetime.date) -> str:
    return f"{day.month}/{day.day}/{day.year}"


@dataclass(frozen=True)
class Available:
    is_available = True


@dataclass(frozen=True)
class Conflict:
    with_booking: Any
    is_available = False

    @property
    def interval(self) -> Interval:
        return interval_of(self.with_booking)

    def describe(self) -> str:
        interval = self.interval
        return (
            f"Your selected dates overlap with a booking by "
            f"{self.with_booking.customer_name} "
            f"({_display_date(interval.start)} - {_display_date(interval.end)})."
        )


AvailabilityResult = Available | Conflict


def _in_check_in_order(bookings: Iterable[Any]) -> list[Any]:
    return sorted(bookings, key=lambda b: (interval_of(b).start, b.id or 0))


def check_availability(
    existing_bookings: Iterable[Any],
    candidate: Interval,
    property_id: Optional[int] = None,
    exclude_booking_id: Optional[int] = None,
) -> AvailabilityResult:
    """
    Decide whether ``candidate`` may be booked.

    Returns ``Conflict`` with the earliest (by check-in) overlapping booking,
    otherwise ``Available``. ``exclude_booking_id`` drops the booking being
    edited so it never conflicts with its own previous dates.
    """
    remaining = [
        b
        for b in existing_bookings
        if (property_id is None or b.property_id == property_id)
        and (exclude_booking_id is None or b.id != exclude_booking_id)
    ]

    for booking in _in_check_in_order(remaining):
        if overlaps(interval_of(booking), candidate):
            return Conflict(with_booking=booking)
    return Available()


def booking_on(
    bookings: Iterable[Any], day: datetime.date, property_id: Optional[int] = None
) -> Optional[Any]:
    """First booking (by check-in) occupying ``day``, or None."""
    for booking in _in_check_in_order(bookings):
        if property_id is not None and booking.property_id != property_id:
            continue
        if contains(interval_of(booking), day):
            return booking
    return None
