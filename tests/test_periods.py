"""Tests for period keys and comparison windows."""

from datetime import date

import pytest

from ledgerlens.domain.entities import CompareOption, Granularity
from ledgerlens.domain.periods import period_key, previous_window, week_number


@pytest.mark.parametrize(
    "granularity,expected",
    [
        (Granularity.DAY, "2024-03-07"),
        (Granularity.WEEK, "2024-W10"),
        (Granularity.MONTH, "2024-03"),
        (Granularity.QUARTER, "2024-Q1"),
        (Granularity.YEAR, "2024"),
    ],
)
def test_period_key_formats(granularity, expected):
    assert period_key(date(2024, 3, 7), granularity) == expected


def test_week_number_counts_from_january_first():
    # 2024-01-01 is a Monday
    assert week_number(date(2024, 1, 1)) == 1
    assert week_number(date(2024, 1, 6)) == 1
    assert week_number(date(2024, 1, 7)) == 1
    assert week_number(date(2024, 1, 8)) == 2


def test_week_number_is_zero_when_year_starts_on_sunday():
    # 2023-01-01 is a Sunday
    assert week_number(date(2023, 1, 1)) == 0
    assert period_key(date(2023, 1, 1), Granularity.WEEK) == "2023-W0"
    assert week_number(date(2023, 1, 2)) == 1


def test_week_keys_are_not_zero_padded():
    assert period_key(date(2024, 1, 2), Granularity.WEEK) == "2024-W1"
    assert period_key(date(2024, 12, 31), Granularity.WEEK) == "2024-W53"


def test_quarter_boundaries():
    assert period_key(date(2024, 4, 1), Granularity.QUARTER) == "2024-Q2"
    assert period_key(date(2024, 12, 31), Granularity.QUARTER) == "2024-Q4"


def test_previous_period_window_has_identical_length():
    assert previous_window(
        date(2024, 2, 1), date(2024, 2, 10), CompareOption.PREVIOUS_PERIOD
    ) == (date(2024, 1, 22), date(2024, 1, 31))


def test_previous_month_window():
    assert previous_window(
        date(2024, 3, 1), date(2024, 3, 31), CompareOption.PREVIOUS_MONTH
    ) == (date(2024, 2, 1), date(2024, 2, 29))


def test_previous_year_window_clamps_leap_day():
    assert previous_window(
        date(2024, 2, 1), date(2024, 2, 29), CompareOption.PREVIOUS_YEAR
    ) == (date(2023, 2, 1), date(2023, 2, 28))


def test_single_day_previous_period():
    assert previous_window(
        date(2024, 3, 1), date(2024, 3, 1), CompareOption.PREVIOUS_PERIOD
    ) == (date(2024, 2, 29), date(2024, 2, 29))
