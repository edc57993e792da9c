import calendar
import datetime
from dataclasses import dataclass
from typing import Any, Iterable

from rentdesk.domain.availability import booking_on
from rentdesk.domain.colors import color_of


@dataclass(frozen=True)
class DayMarking:
    day: datetime.date
    booking_id: int
    customer_name: str
    color: str
    is_check_in: bool
    is_check_out: bool


def get_month_dates(year: int, month: int) -> list[datetime.date]:
    _, days_in_month = calendar.monthrange(year, month)
    return [
        datetime.date(year, month, day)
        for day in range(1, days_in_month + 1)
    ]


def month_markings(
    bookings: Iterable[Any], year: int, month: int
) -> dict[datetime.date, DayMarking]:
    """Booked days of a month, each with the occupying booking and its colour."""
    bookings = list(bookings)
    markings: dict[datetime.date, DayMarking] = {}
    for day in get_month_dates(year, month):
        booking = booking_on(bookings, day)
        if booking is None:
            continue
        markings[day] = DayMarking(
            day=day,
            booking_id=booking.id,
            customer_name=booking.customer_name,
            color=color_of(booking.customer_name),
            is_check_in=booking.check_in == day,
            is_check_out=booking.check_out == day,
        )
    return markings
