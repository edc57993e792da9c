"""
Booking occupancy interval.

Both boundaries are inclusive calendar days: a guest checking out on the
10th still occupies the 10th, so a new check-in on the same day overlaps.
"""
import datetime
from dataclasses import dataclass


class InvalidInterval(ValueError):
    """Raised when check-out falls before check-in."""

    def __init__(self, start: datetime.date, end: datetime.date):
        super().__init__(f"Check-out {end.isoformat()} is before check-in {start.isoformat()}")
        self.start = start
        self.end = end


def to_day(value: datetime.date | datetime.datetime) -> datetime.date:
    """Drops the wall-clock part so comparisons never see a time of day."""
    if isinstance(value, datetime.datetime):
        return value.date()
    return value


@dataclass(frozen=True)
class Interval:
    start: datetime.date
    end: datetime.date

    def __post_init__(self):
        start, end = to_day(self.start), to_day(self.end)
        if end < start:
            raise InvalidInterval(start, end)
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    @property
    def nights(self) -> int:
        return (self.end - self.start).days

    def days(self) -> list[datetime.date]:
        return [
            self.start + datetime.timedelta(days=offset)
            for offset in range(self.nights + 1)
        ]

    def __str__(self) -> str:
        return f"{self.start.isoformat()} - {self.end.isoformat()}"


def overlaps(a: Interval, b: Interval) -> bool:
    return a.start <= b.end and b.start <= a.end


def contains(interval: Interval, day: datetime.date | datetime.datetime) -> bool:
    day = to_day(day)
    return interval.start <= day <= interval.end
