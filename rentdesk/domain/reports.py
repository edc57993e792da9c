import datetime
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable


@dataclass
class PropertyRevenue:
    property_id: int
    property_name: str
    booking_count: int = 0
    revenue: Decimal = Decimal("0")


@dataclass
class RevenueSummary:
    paid_revenue: Decimal = Decimal("0")
    unpaid_revenue: Decimal = Decimal("0")
    paid_bookings: int = 0
    unpaid_bookings: int = 0
    current_month_bookings: int = 0
    current_month_revenue: Decimal = Decimal("0")
    upcoming_bookings: int = 0
    by_property: list[PropertyRevenue] = field(default_factory=list)


def revenue_summary(
    properties: Iterable[Any], bookings: Iterable[Any], today: datetime.date
) -> RevenueSummary:
    """
    Revenue figures for the owner's dashboard.

    Only paid bookings count as revenue; unpaid totals are reported
    separately. "Current month" is by check-in date, "upcoming" means a
    check-in after today. Properties are ranked by revenue, highest first.
    """
    summary = RevenueSummary()
    per_property = {
        p.id: PropertyRevenue(property_id=p.id, property_name=p.name) for p in properties
    }

    for booking in bookings:
        amount = Decimal(booking.total_amount or 0)
        in_current_month = (
            booking.check_in.year == today.year and booking.check_in.month == today.month
        )

        if booking.is_paid:
            summary.paid_revenue += amount
            summary.paid_bookings += 1
            if in_current_month:
                summary.current_month_revenue += amount
        else:
            summary.unpaid_revenue += amount
            summary.unpaid_bookings += 1

        if in_current_month:
            summary.current_month_bookings += 1
        if booking.check_in > today:
            summary.upcoming_bookings += 1

        stats = per_property.get(booking.property_id)
        if stats is not None:
            stats.booking_count += 1
            if booking.is_paid:
                stats.revenue += amount

    summary.by_property = sorted(per_property.values(), key=lambda s: s.revenue, reverse=True)
    return summary
