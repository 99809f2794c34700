"""Date parsing utilities."""

import re
from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports the formats statements and operators actually use:
    - ISO dates: "2024-01-15"
    - Compact bank dates: "20240115" (optionally followed by time/timezone)
    - Day-first dates: "15/01/2024", "15.01.2024"
    - Relative dates: "today", "yesterday"

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    if date_str is None or not str(date_str).strip():
        raise ValueError("Empty date string")

    date_str = str(date_str).strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date.fromisoformat(date_str[:10])
    except ValueError:
        pass

    compact = re.match(r"^(\d{8})", date_str)
    if compact:
        try:
            return date(
                int(compact.group(1)[:4]),
                int(compact.group(1)[4:6]),
                int(compact.group(1)[6:8]),
            )
        except ValueError as e:
            raise ValueError(f"Could not parse date '{date_str}': {e}")

    try:
        return date_parser.parse(date_str, dayfirst=True).date()
    except (ValueError, OverflowError, TypeError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def month_bounds(month: int, year: int) -> tuple[date, date]:
    """Return the first and last day of a calendar month.

    Args:
        month: Month number (1-12)
        year: Four-digit year

    Returns:
        Tuple of (first_day, last_day), both inclusive
    """
    first_day = date(year, month, 1)
    last_day = first_day + relativedelta(day=31)
    return (first_day, last_day)
