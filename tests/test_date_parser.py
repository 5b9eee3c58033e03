"""Tests for date parser with relative dates."""

import pytest
from datetime import date, timedelta

from ledgerbook.utils.date_parser import parse_date

TODAY = date(2026, 1, 31)


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)
    assert parse_date("January 15, 2024") == date(2024, 1, 15)


def test_parse_today():
    """Test parsing 'today'."""
    assert parse_date("today") == date.today()


def test_parse_yesterday_and_tomorrow():
    assert parse_date("yesterday", today=TODAY) == date(2026, 1, 30)
    assert parse_date(" Tomorrow ", today=TODAY) == date(2026, 2, 1)


def test_parse_next_month_clamps_to_month_end():
    """Test that 'next month' from Jan 31 lands on the last day of February."""
    assert parse_date("next month", today=TODAY) == date(2026, 2, 28)


def test_parse_in_n_units():
    assert parse_date("in 3 days", today=TODAY) == TODAY + timedelta(days=3)
    assert parse_date("in 2 weeks", today=TODAY) == TODAY + timedelta(weeks=2)
    assert parse_date("in 1 year", today=TODAY) == date(2027, 1, 31)


def test_parse_invalid_date():
    """Test parsing invalid date."""
    with pytest.raises(ValueError):
        parse_date("not a date at all")
