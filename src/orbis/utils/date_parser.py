"""Date parsing utilities."""

import calendar
from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


MONTH_ABBREVIATIONS = (
    "jan", "fev", "mar", "abr", "mai", "jun",
    "jul", "ago", "set", "out", "nov", "dez",
)


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports:
    - ISO dates: "2024-01-15"
    - Relative dates: "today", "yesterday"
    - Anything else dateutil understands, e.g. "Jan 15 2024"

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
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_statement_date(date_str: str) -> date:
    """Parse a date cell from a bank statement.

    Slash-separated values with a four digit year are read as DD/MM/YYYY,
    the convention of Brazilian bank exports. Everything else goes through
    the generic parser.

    Raises:
        ValueError: If the value is not a valid calendar date (header cells
            such as "Data" end up here)
    """
    date_str = date_str.strip()
    if "/" in date_str:
        parts = date_str.split("/")
        if len(parts) == 3 and len(parts[2]) == 4:
            try:
                return date(int(parts[2]), int(parts[1]), int(parts[0]))
            except ValueError as e:
                raise ValueError(f"Could not parse date '{date_str}': {e}")
    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_ofx_date(raw: str) -> date:
    """Parse the leading YYYYMMDD of an OFX <DTPOSTED> value.

    Raises:
        ValueError: If fewer than 8 digits are present or the date is invalid
    """
    digits = raw[:8]
    if len(digits) != 8 or not digits.isdigit():
        raise ValueError(f"Could not parse OFX date '{raw}'")
    return date(int(digits[:4]), int(digits[4:6]), int(digits[6:8]))


def month_start(day: date) -> date:
    """First day of the month containing ``day``."""
    return day.replace(day=1)


def months_ago(day: date, months: int) -> date:
    """First day of the month ``months`` calendar months before ``day``."""
    return (day - relativedelta(months=months)).replace(day=1)


def same_month(a: date, b: date) -> bool:
    """True if both dates fall in the same calendar month."""
    return a.year == b.year and a.month == b.month


def days_in_month(day: date) -> int:
    """Number of days in the month containing ``day``."""
    return calendar.monthrange(day.year, day.month)[1]


def month_label(day: date) -> str:
    """Short month label such as "jan 24"."""
    return f"{MONTH_ABBREVIATIONS[day.month - 1]} {day.strftime('%y')}"


def day_label(day: date) -> str:
    """Short day label such as "05 jan"."""
    return f"{day.day:02d} {MONTH_ABBREVIATIONS[day.month - 1]}"
