"""
Unit tests for the inclusive booking interval
"""
from datetime import date, datetime

import pytest

from rentdesk.domain.interval import Interval, InvalidInterval, contains, overlaps


class TestIntervalConstruction:
    def test_check_out_before_check_in_rejected(self):
        with pytest.raises(InvalidInterval):
            Interval(date(2024, 6, 15), date(2024, 6, 10))

    def test_invalid_interval_is_value_error(self):
        with pytest.raises(ValueError):
            Interval(date(2024, 6, 2), date(2024, 6, 1))

    def test_same_day_stay_allowed(self):
        interval = Interval(date(2024, 6, 10), date(2024, 6, 10))
        assert interval.nights == 0
        assert interval.days() == [date(2024, 6, 10)]

    def test_datetimes_normalized_to_days(self):
        interval = Interval(datetime(2024, 6, 10, 23, 59), datetime(2024, 6, 12, 0, 1))
        assert interval.start == date(2024, 6, 10)
        assert interval.end == date(2024, 6, 12)
        assert interval.nights == 2

    def test_str(self):
        assert str(Interval(date(2024, 6, 10), date(2024, 6, 15))) == "2024-06-10 - 2024-06-15"


class TestOverlap:
    """Both boundaries are inclusive"""

    def test_shared_boundary_day_overlaps(self):
        # Check-out on the 15th, new check-in on the 15th
        a = Interval(date(2024, 6, 10), date(2024, 6, 15))
        b = Interval(date(2024, 6, 15), date(2024, 6, 20))
        assert overlaps(a, b) is True

    def test_next_day_does_not_overlap(self):
        a = Interval(date(2024, 6, 10), date(2024, 6, 15))
        b = Interval(date(2024, 6, 16), date(2024, 6, 20))
        assert overlaps(a, b) is False

    def test_contained_within(self):
        a = Interval(date(2024, 6, 1), date(2024, 6, 30))
        b = Interval(date(2024, 6, 5), date(2024, 6, 6))
        assert overlaps(a, b) is True

    @pytest.mark.parametrize(
        "a, b",
        [
            ((date(2024, 6, 10), date(2024, 6, 15)), (date(2024, 6, 12), date(2024, 6, 18))),
            ((date(2024, 6, 10), date(2024, 6, 15)), (date(2024, 6, 16), date(2024, 6, 18))),
            ((date(2024, 6, 10), date(2024, 6, 10)), (date(2024, 6, 10), date(2024, 6, 10))),
            ((date(2024, 6, 1), date(2024, 6, 3)), (date(2024, 5, 1), date(2024, 5, 31))),
        ],
    )
    def test_symmetric(self, a, b):
        a, b = Interval(*a), Interval(*b)
        assert overlaps(a, b) == overlaps(b, a)


class TestContains:
    def test_both_ends_included(self):
        interval = Interval(date(2024, 6, 10), date(2024, 6, 15))
        assert contains(interval, date(2024, 6, 10))
        assert contains(interval, date(2024, 6, 15))
        assert not contains(interval, date(2024, 6, 16))
        assert not contains(interval, date(2024, 6, 9))

    def test_datetime_day(self):
        interval = Interval(date(2024, 6, 10), date(2024, 6, 15))
        assert contains(interval, datetime(2024, 6, 15, 23, 0))
