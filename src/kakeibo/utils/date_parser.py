"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and relative
    ones: "today", "yesterday", "tomorrow", "this month", "last month",
    "next month" (first day of that month) and "end of month".

    Args:
        date_str: Date string
        today: Reference date for relative values (defaults to today)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "next month": (today + relativedelta(months=1)).replace(day=1),
        "end of month": today + relativedelta(day=31),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def month_range(month: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get first and last day of a month.

    Args:
        month: "YYYY-MM", "this-month" or "last-month"
        today: Reference date for relative values

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If the month string is not recognized
    """
    month = month.strip().lower()
    today = today or date.today()

    if month == "this-month":
        start = today.replace(day=1)
    elif month == "last-month":
        start = (today - relativedelta(months=1)).replace(day=1)
    else:
        try:
            year_str, month_str = month.split("-")
            start = date(int(year_str), int(month_str), 1)
        except ValueError:
            raise ValueError(
                f"Unknown month: '{month}'. Use YYYY-MM, this-month or last-month"
            )

    return start, start + relativedelta(day=31)
