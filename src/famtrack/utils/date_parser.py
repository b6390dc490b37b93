"""Date parsing utilities."""

import re
from datetime import date, timedelta
from typing import Optional
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from famtrack.utils.text import strip_accents

# Portuguese month abbreviations used on card invoices ("15 JAN")
MONTH_ABBREVIATIONS = {
    "jan": 1, "fev": 2, "mar": 3, "abr": 4, "mai": 5, "jun": 6,
    "jul": 7, "ago": 8, "set": 9, "out": 10, "nov": 11, "dez": 12,
}

# Full month names as written in long-form dates ("4 de Janeiro de 2025")
MONTH_NAMES = {
    "janeiro": 1, "fevereiro": 2, "marco": 3, "abril": 4, "maio": 5, "junho": 6,
    "julho": 7, "agosto": 8, "setembro": 9, "outubro": 10, "novembro": 11,
    "dezembro": 12,
}

_DAY_MONTH_YEAR = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_DAY_MONTH = re.compile(r"^(\d{1,2})/(\d{1,2})$")
_ISO = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "15/01/2024" (day first), "15/01", "January 15, 2024"
    - Relative dates: "today", "yesterday", "last month", "this year", etc.

    Args:
        date_str: Date string in various formats

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

    if date_str.startswith(("last ", "this ", "next ")):
        direction, period = date_str.split(" ", 1)
        step = {"last": -1, "this": 0, "next": 1}[direction]
        if period == "month":
            return (today + relativedelta(months=step)).replace(day=1)
        if period == "year":
            return today.replace(month=1, day=1) + relativedelta(years=step)
        if period == "week":
            return today - timedelta(days=today.weekday()) + timedelta(weeks=step)

    try:
        if any(p.match(date_str) for p in (_DAY_MONTH_YEAR, _DAY_MONTH, _ISO)):
            return parse_statement_date(date_str)
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a specified period.

    Args:
        period: Period string (this-month, this-year, last-month, last-year)

    Returns:
        Tuple of (start_date, end_date) for the specified period

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        return (today.replace(day=1), today)
    if period == "this-year":
        return (today.replace(month=1, day=1), today)
    if period == "last-month":
        start_date = (today - relativedelta(months=1)).replace(day=1)
        return (start_date, today.replace(day=1) - timedelta(days=1))
    if period == "last-year":
        start_date = today.replace(month=1, day=1) - relativedelta(years=1)
        return (start_date, today.replace(month=1, day=1) - timedelta(days=1))
    if period == "next-month":
        start_date = (today + relativedelta(months=1)).replace(day=1)
        return (start_date, start_date + relativedelta(months=1) - timedelta(days=1))

    raise ValueError(
        f"Unknown period: '{period}'. Supported periods: "
        "this-month, this-year, last-month, last-year, next-month"
    )


def add_months(value: date, months: int) -> date:
    """Shift a date by whole calendar months, clamping to the month's last day."""
    return value + relativedelta(months=months)


def infer_year(month: int, reference: Optional[date] = None) -> int:
    """Year for a day/month pair printed without one.

    Statements cover the past, so a month later than the reference month
    belongs to the previous year.
    """
    reference = reference or date.today()
    return reference.year - 1 if month > reference.month else reference.year


def parse_statement_date(date_str: str, reference: Optional[date] = None) -> date:
    """Parse the numeric date formats found on statements.

    Accepts "DD/MM/YYYY", "DD/MM" (year inferred) and "YYYY-MM-DD".

    Raises:
        ValueError: If the string is not one of these formats or not a real date
    """
    text = date_str.strip()
    match = _DAY_MONTH_YEAR.match(text)
    if match:
        day, month, year = (int(g) for g in match.groups())
        return date(year, month, day)
    match = _DAY_MONTH.match(text)
    if match:
        day, month = int(match.group(1)), int(match.group(2))
        return date(infer_year(month, reference), month, day)
    match = _ISO.match(text)
    if match:
        year, month, day = (int(g) for g in match.groups())
        return date(year, month, day)
    raise ValueError(f"Unrecognized statement date '{date_str}'")


def parse_abbreviated_date(day: str, month_abbr: str, reference: Optional[date] = None) -> date:
    """Parse "15" + "JAN" into a date, inferring the year."""
    month = MONTH_ABBREVIATIONS.get(month_abbr.lower())
    if month is None:
        raise ValueError(f"Unknown month abbreviation '{month_abbr}'")
    return date(infer_year(month, reference), month, int(day))


def parse_long_date(day: str, month_name: str, year: str) -> date:
    """Parse "4" + "Janeiro" + "2025" into a date."""
    month = MONTH_NAMES.get(strip_accents(month_name).lower())
    if month is None:
        raise ValueError(f"Unknown month name '{month_name}'")
    return date(int(year), month, int(day))
