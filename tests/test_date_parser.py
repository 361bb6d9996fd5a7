"""Tests for date parsing utilities."""

import pytest
from datetime import date, timedelta

from ledgerkit.utils.date_parser import parse_date, parse_month


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)
    assert parse_date("15 January 2024") == date(2024, 1, 15)


def test_parse_today():
    """Test parsing 'today'."""
    assert parse_date("today") == date.today()


def test_parse_yesterday():
    """Test parsing 'yesterday'."""
    assert parse_date("Yesterday") == date.today() - timedelta(days=1)


def test_parse_tomorrow():
    """Test parsing 'tomorrow'."""
    assert parse_date(" tomorrow ") == date.today() + timedelta(days=1)


def test_parse_invalid_date():
    """Test that invalid dates raise ValueError."""
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date")


@pytest.mark.parametrize(
    "month_str,expected",
    [
        ("2024-03", (date(2024, 3, 1), date(2024, 3, 31))),
        ("2024-02", (date(2024, 2, 1), date(2024, 2, 29))),
        ("2025-02", (date(2025, 2, 1), date(2025, 2, 28))),
        ("2024-12", (date(2024, 12, 1), date(2024, 12, 31))),
    ],
)
def test_parse_month(month_str, expected):
    assert parse_month(month_str) == expected


@pytest.mark.parametrize("month_str", ["2024", "2024-13", "2024-00", "March 2024", "2024-03-01"])
def test_parse_month_invalid(month_str):
    with pytest.raises(ValueError, match="Could not parse month"):
        parse_month(month_str)
