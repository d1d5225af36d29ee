"""
Tests for Month value type and the interval expander
"""
from datetime import date, datetime

import pytest

from subscriptions_service.domain.month import (
    Month, MonthInterval, expand_interval, month_range,
)


class TestMonth:
    def test_parse(self):
        assert Month.parse("01-2025") == Month(2025, 1)
        assert Month.parse("12-1999") == Month(1999, 12)

    @pytest.mark.parametrize("text", ["2025-01", "1-2025", "13-2025", "00-2025", "ab-2025", "", "01/2025"])
    def test_parse_malformed(self, text):
        with pytest.raises(ValueError):
            Month.parse(text)

    def test_str_round_trip_format(self):
        assert str(Month(2025, 3)) == "03-2025"

    def test_from_date_truncates(self):
        assert Month.from_date(date(2025, 7, 31)) == Month(2025, 7)
        assert Month.from_date(datetime(2025, 7, 15, 23, 59)) == Month(2025, 7)

    def test_ordering_across_years(self):
        assert Month(2024, 12) < Month(2025, 1)
        assert Month(2025, 2) > Month(2025, 1)

    def test_index_round_trip(self):
        m = Month(2025, 6)
        assert Month.from_index(m.index) == m

    def test_first_day(self):
        assert Month(2025, 9).first_day() == date(2025, 9, 1)

    def test_invalid_month_rejected(self):
        with pytest.raises(ValueError):
            Month(2025, 0)

    def test_year_zero_rejected(self):
        with pytest.raises(ValueError):
            Month.parse("01-0000")


class TestMonthRange:
    def test_inclusive(self):
        assert list(month_range(Month(2025, 11), Month(2026, 2))) == [
            Month(2025, 11), Month(2025, 12), Month(2026, 1), Month(2026, 2),
        ]

    def test_empty_when_inverted(self):
        assert list(month_range(Month(2025, 5), Month(2025, 4))) == []


class TestExpandInterval:
    def test_closed_interval(self):
        interval = MonthInterval(Month(2025, 1), Month(2025, 3))
        assert expand_interval(interval, as_of=Month(2030, 1)) == [
            Month(2025, 1), Month(2025, 2), Month(2025, 3),
        ]

    def test_closed_interval_ignores_as_of(self):
        interval = MonthInterval(Month(2025, 1), Month(2025, 12))
        assert len(expand_interval(interval, as_of=Month(2025, 2))) == 12

    def test_open_interval_resolves_to_as_of(self):
        interval = MonthInterval(Month(2025, 1))
        months = expand_interval(interval, as_of=Month(2025, 4))
        assert months == [Month(2025, 1), Month(2025, 2), Month(2025, 3), Month(2025, 4)]

    def test_open_interval_starting_after_as_of_is_empty(self):
        interval = MonthInterval(Month(2026, 1))
        assert expand_interval(interval, as_of=Month(2025, 10)) == []

    def test_clipped_to_window(self):
        interval = MonthInterval(Month(2025, 1), Month(2025, 12))
        months = expand_interval(interval, Month(2026, 1), lower=Month(2025, 11), upper=Month(2026, 3))
        assert months == [Month(2025, 11), Month(2025, 12)]

    def test_open_interval_clipped_by_window_end(self):
        interval = MonthInterval(Month(2025, 1))
        months = expand_interval(interval, Month(2025, 12), upper=Month(2025, 9))
        assert len(months) == 9
        assert months[-1] == Month(2025, 9)

    def test_window_outside_interval(self):
        interval = MonthInterval(Month(2025, 1), Month(2025, 3))
        assert expand_interval(interval, Month(2025, 10), lower=Month(2025, 5)) == []

    def test_inverted_interval_is_empty(self):
        interval = MonthInterval(Month(2025, 5), Month(2025, 2))
        assert expand_interval(interval, Month(2025, 10)) == []
