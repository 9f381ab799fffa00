"""
Date utilities for parsing periods, date ranges and filter bounds.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Optional, Tuple


def parse_period(period: str) -> Tuple[str, str]:
    """
    Parse a period string into (start_date, end_date).

    Supported periods:
    - "this_month", "last_month"
    - "this_year", "last_year"
    - "last_7_days", "last_30_days", "last_90_days"
    - "ytd" (year to date)

    Returns:
        Tuple of (start_date, end_date) as "YYYY-MM-DD" strings

    Raises:
        ValueError: If period is not recognized
    """
    today = datetime.now()

    if period == "this_month":
        return get_month_range(today.year, today.month)

    elif period == "last_month":
        last_day_last_month = today.replace(day=1) - timedelta(days=1)
        return get_month_range(last_day_last_month.year, last_day_last_month.month)

    elif period == "this_year":
        return f"{today.year}-01-01", f"{today.year}-12-31"

    elif period == "last_year":
        year = today.year - 1
        return f"{year}-01-01", f"{year}-12-31"

    elif period in ("last_7_days", "last_30_days", "last_90_days"):
        days = int(period.split("_")[1])
        start = today - timedelta(days=days)
        return start.strftime("%Y-%m-%d"), today.strftime("%Y-%m-%d")

    elif period == "ytd":
        return f"{today.year}-01-01", today.strftime("%Y-%m-%d")

    else:
        raise ValueError(f"Unknown period: {period}")


def get_month_range(year: int, month: int) -> Tuple[str, str]:
    """
    Get the date range for a specific month.

    Args:
        year: Year (e.g., 2026)
        month: Month (1-12)

    Returns:
        Tuple of (start_date, end_date) as "YYYY-MM-DD" strings

    Raises:
        ValueError: If month is not in valid range (1-12)
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")

    _, last_day = calendar.monthrange(year, month)

    return f"{year:04d}-{month:02d}-01", f"{year:04d}-{month:02d}-{last_day:02d}"


def current_month_range() -> Tuple[str, str]:
    """Date range covering the current calendar month."""
    today = datetime.now()
    return get_month_range(today.year, today.month)


def parse_date(value: Optional[str]) -> Optional[date]:
    """
    Parse a filter bound into a calendar date.

    Accepts "YYYY-MM-DD" or an ISO timestamp (the time part is ignored).

    Returns:
        The date, or None when the value is empty or cannot be parsed
    """
    if not value:
        return None
    if len(value) > 10 and value[10] not in "T ":
        return None
    try:
        return date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        return None
