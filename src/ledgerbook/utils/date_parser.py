"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "tomorrow",
      "next month", "in 3 days", "in 2 weeks", "in 1 month"

    Args:
        date_str: Date string in various formats
        today: Reference date for relative dates (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    # Handle relative dates
    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "next week": today + timedelta(weeks=1),
        "next month": today + relativedelta(months=1),
        "next year": today + relativedelta(years=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    # Handle "in N days/weeks/months/years"
    parts = date_str.split()
    if len(parts) == 3 and parts[0] == "in" and parts[1].isdigit():
        count = int(parts[1])
        unit = parts[2].rstrip("s")
        if unit == "day":
            return today + timedelta(days=count)
        elif unit == "week":
            return today + timedelta(weeks=count)
        elif unit == "month":
            return today + relativedelta(months=count)
        elif unit == "year":
            return today + relativedelta(years=count)

    # Try parsing as absolute date
    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
