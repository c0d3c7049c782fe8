"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from typing import Any, Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Accepts absolute dates ("2024-01-15", "15 Jan 2024") and the relative
    forms "today", "yesterday", "this week", "this month", "last month",
    "this year".

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "this week": today - timedelta(days=today.weekday()),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "this year": today.replace(month=1, day=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Args:
        period: One of this-week, this-month, last-month, this-year

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-week":
        return today - timedelta(days=today.weekday()), today
    if period == "this-month":
        return today.replace(day=1), today
    if period == "last-month":
        start_date = (today - relativedelta(months=1)).replace(day=1)
        end_date = today.replace(day=1) - timedelta(days=1)
        return start_date, end_date
    if period == "this-year":
        return today.replace(month=1, day=1), today

    raise ValueError(
        f"Unknown period: '{period}'. Supported periods: this-week, this-month, last-month, this-year"
    )


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a vendor timestamp (ISO 8601), returning None when unusable."""
    if not value or not isinstance(value, str):
        return None
    try:
        return date_parser.isoparse(value)
    except (ValueError, OverflowError):
        return None
