"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "15 January 2024", ...) and the
    relative words "today", "yesterday" and "tomorrow".

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        dt = date_parser.parse(date_str, dayfirst=False, yearfirst=True)
        return dt.date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_month(month_str: str) -> tuple[date, date]:
    """Return the first and last day of a month given as "YYYY-MM".

    Args:
        month_str: Month string, e.g. "2024-03"

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If the month string is not of the form YYYY-MM
    """
    parts = month_str.strip().split("-")
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        raise ValueError(f"Could not parse month '{month_str}': expected YYYY-MM")

    year, month = int(parts[0]), int(parts[1])
    if not 1 <= month <= 12:
        raise ValueError(f"Could not parse month '{month_str}': month must be 01-12")

    start_date = date(year, month, 1)
    end_date = start_date + relativedelta(months=1) - timedelta(days=1)
    return (start_date, end_date)
