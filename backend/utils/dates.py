"""Date helpers. Dates are stored as YYYY-MM-DD strings so they sort lexically."""

import calendar
from datetime import date
from typing import Optional

from utils.errors import ValidationError

MIN_YEAR, MAX_YEAR = date.min.year, date.max.year


def normalize_date(date_str: Optional[str]) -> str:
    """Normalize a date string to YYYY-MM-DD; empty input means today."""
    if not date_str:
        return date.today().isoformat()
    # Handle ISO format with time component (e.g., 2025-12-27T00:00:00.000Z)
    if 'T' in date_str:
        date_str = date_str.split('T')[0]
    try:
        return date.fromisoformat(date_str).isoformat()
    except ValueError:
        raise ValidationError(f"Invalid date '{date_str}', expected YYYY-MM-DD")


def resolve_month(year: Optional[int], month: Optional[int]) -> tuple[int, int]:
    """Fill in the current year/month for missing values and check the range."""
    today = date.today()
    if year is None:
        year = today.year
    if month is None:
        month = today.month
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise ValidationError(f"Year must be between {MIN_YEAR} and {MAX_YEAR}")
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12")
    return year, month


def month_bounds(year: int, month: int) -> tuple[str, str]:
    """First and last day of a month as YYYY-MM-DD strings (inclusive)."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1).isoformat(), date(year, month, last_day).isoformat()
