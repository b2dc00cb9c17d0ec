"""Tests for date parsing utilities."""

from datetime import date

import pytest

from ledgerlens.utils.date_parser import PERIODS, get_date_range, parse_date

TODAY = date(2024, 5, 15)  # a Wednesday


class TestParseDate:
    """Tests for parse_date."""

    def test_iso_date(self):
        assert parse_date("2024-01-15") == date(2024, 1, 15)

    def test_written_date(self):
        assert parse_date("January 15, 2024") == date(2024, 1, 15)

    def test_whitespace_and_case(self):
        assert parse_date("  TODAY  ", today=TODAY) == TODAY

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("yesterday", date(2024, 5, 14)),
            ("this week", date(2024, 5, 13)),
            ("last week", date(2024, 5, 6)),
            ("this month", date(2024, 5, 1)),
            ("last month", date(2024, 4, 1)),
            ("this year", date(2024, 1, 1)),
            ("last year", date(2023, 1, 1)),
        ],
    )
    def test_relative_dates(self, text, expected):
        assert parse_date(text, today=TODAY) == expected

    def test_invalid_date(self):
        with pytest.raises(ValueError, match="Could not parse date"):
            parse_date("not a date")


class TestGetDateRange:
    """Tests for get_date_range."""

    @pytest.mark.parametrize(
        "period,expected",
        [
            ("this-week", (date(2024, 5, 13), TODAY)),
            ("this-month", (date(2024, 5, 1), TODAY)),
            ("this-quarter", (date(2024, 4, 1), TODAY)),
            ("this-year", (date(2024, 1, 1), TODAY)),
            ("last-week", (date(2024, 5, 6), date(2024, 5, 12))),
            ("last-month", (date(2024, 4, 1), date(2024, 4, 30))),
            ("last-quarter", (date(2024, 1, 1), date(2024, 3, 31))),
            ("last-year", (date(2023, 1, 1), date(2023, 12, 31))),
        ],
    )
    def test_periods(self, period, expected):
        assert get_date_range(period, today=TODAY) == expected

    def test_every_period_is_supported(self):
        for period in PERIODS:
            start, end = get_date_range(period, today=TODAY)
            assert start <= end

    def test_last_month_in_january(self):
        assert get_date_range("last-month", today=date(2024, 1, 10)) == (
            date(2023, 12, 1),
            date(2023, 12, 31),
        )

    def test_last_quarter_in_first_quarter(self):
        assert get_date_range("last-quarter", today=date(2024, 2, 10)) == (
            date(2023, 10, 1),
            date(2023, 12, 31),
        )

    def test_unknown_period(self):
        with pytest.raises(ValueError, match="Unknown period"):
            get_date_range("next-decade")
