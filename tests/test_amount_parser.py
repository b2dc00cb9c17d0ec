"""Tests for amount parsing utilities."""

from decimal import Decimal

import pytest

from ledgerlens.utils.amount_parser import parse_amount


@pytest.mark.parametrize(
    "text,expected",
    [
        ("1500000", Decimal("1500000")),
        ("1,500,000", Decimal("1500000")),
        ("1,500,000.50", Decimal("1500000.50")),
        ("1500000 VND", Decimal("1500000")),
        ("₫1,500,000", Decimal("1500000")),
        ("250000đ", Decimal("250000")),
        ("$12.30", Decimal("12.30")),
        ("  42 usd ", Decimal("42")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "12..3", "NaN", "Infinity"])
def test_parse_amount_rejects_garbage(text):
    with pytest.raises(ValueError):
        parse_amount(text)


def test_parse_amount_rejects_negative():
    with pytest.raises(ValueError, match="negative"):
        parse_amount("-5")
