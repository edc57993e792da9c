"""
Unit tests for month calendar markings
"""
from datetime import date
from types import SimpleNamespace

from rentdesk.domain.calendar import get_month_dates, month_markings
from rentdesk.domain.colors import color_of


def test_month_dates_leap_february():
    dates = get_month_dates(2024, 2)
    assert len(dates) == 29
    assert dates[0] == date(2024, 2, 1)
    assert dates[-1] == date(2024, 2, 29)


def test_markings_cover_inclusive_stay():
    booking = SimpleNamespace(
        id=5,
        property_id=1,
        customer_name="Jane Guest",
        check_in=date(2024, 5, 30),
        check_out=date(2024, 6, 2),
    )
    markings = month_markings([booking], 2024, 6)

    assert sorted(markings) == [date(2024, 6, 1), date(2024, 6, 2)]
    last_day = markings[date(2024, 6, 2)]
    assert last_day.booking_id == 5
    assert last_day.is_check_out is True
    assert last_day.is_check_in is False
    assert last_day.color == color_of("Jane Guest")
