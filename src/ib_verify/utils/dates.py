"""
Date helpers for test data and calendar widgets.

Dates travel through test data as ``DD/MM/YYYY`` strings; the helpers here
resolve relative tokens, skip weekends and work out how far a month-paged
calendar has to move to reach a target date.
"""

from datetime import date, datetime, timedelta
from typing import Optional
import re

from .exceptions import InvalidDateError

DATE_FORMAT = "%d/%m/%Y"

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

CALENDAR_MONTHS = [
    "JAN", "FEB", "MAR", "APR", "MAY", "JUN",
    "JUL", "AUG", "SEP", "OCT", "NOV", "DEC",
]

_RELATIVE_PATTERN = re.compile(r"^today\s*(?:\+\s*(\d+))?$", re.IGNORECASE)


def parse_ddmmyyyy(value: str) -> date:
    """
    Parse a ``DD/MM/YYYY`` string.

    Args:
        value: Date string such as "05/03/2024"

    Returns:
        Parsed date

    Raises:
        InvalidDateError: If the string is not a valid DD/MM/YYYY date
    """
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except (AttributeError, ValueError) as e:
        raise InvalidDateError(
            f"Invalid date {value!r}. Use DD/MM/YYYY."
        ) from e


def format_ddmmyyyy(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def resolve_relative_date(token: str, today: Optional[date] = None) -> str:
    """
    Resolve ``today`` and ``today+N`` tokens to a DD/MM/YYYY string.

    Any other token is returned unchanged so literal dates pass through.
    """
    match = _RELATIVE_PATTERN.match(token.strip())
    if not match:
        return token

    base = today or date.today()
    offset = int(match.group(1) or 0)
    return format_ddmmyyyy(base + timedelta(days=offset))


def _roll_to_weekday(value: date) -> date:
    # weekday(): Monday=0 .. Sunday=6
    while value.weekday() >= 5:
        value += timedelta(days=1)
    return value


def next_working_day(value: str) -> str:
    """Move a DD/MM/YYYY date forward to Monday if it falls on a weekend."""
    return format_ddmmyyyy(_roll_to_weekday(parse_ddmmyyyy(value)))


def next_working_day_long(value: str) -> str:
    """Same as ``next_working_day`` but formatted as ``DD Month YYYY``."""
    result = _roll_to_weekday(parse_ddmmyyyy(value))
    return f"{result.day:02d} {MONTH_NAMES[result.month - 1]} {result.year}"


def format_long_date(value: str, today: Optional[date] = None) -> str:
    """
    Render a date the way confirmation screens display it.

    ``today`` becomes a zero-padded "05 March 2024"; a DD/MM/YYYY string
    becomes "5 March 2024" with the day left unpadded.
    """
    if value.strip().lower() == "today":
        current = today or date.today()
        return f"{current.day:02d} {MONTH_NAMES[current.month - 1]} {current.year}"

    parsed = parse_ddmmyyyy(value)
    return f"{parsed.day} {MONTH_NAMES[parsed.month - 1]} {parsed.year}"


def is_today(value: str, today: Optional[date] = None) -> bool:
    return parse_ddmmyyyy(value) == (today or date.today())


def is_within_range(value: str, start: str, end: str) -> bool:
    """Inclusive range check on DD/MM/YYYY strings."""
    return parse_ddmmyyyy(start) <= parse_ddmmyyyy(value) <= parse_ddmmyyyy(end)


def calendar_steps(current_label: str, target: str) -> int:
    """
    Count the month pages between a calendar header and a target date.

    Args:
        current_label: Header label shown by the date picker, e.g. "JAN 2024"
        target: Target date as DD/MM/YYYY

    Returns:
        Number of pages to move; positive means "next", negative "previous"

    Raises:
        InvalidDateError: If the label or target cannot be parsed
    """
    parts = current_label.split()
    if len(parts) != 2 or parts[0].upper() not in CALENDAR_MONTHS or not parts[1].isdigit():
        raise InvalidDateError(f"Invalid calendar header label: {current_label!r}")

    current_index = int(parts[1]) * 12 + CALENDAR_MONTHS.index(parts[0].upper())
    target_date = parse_ddmmyyyy(target)
    target_index = target_date.year * 12 + (target_date.month - 1)

    return target_index - current_index


def mask_account_number(account_number: str) -> str:
    """Keep the first and last four characters, mask the rest with ``*``."""
    if len(account_number) <= 8:
        return "*" * len(account_number)
    return account_number[:4] + "*" * (len(account_number) - 8) + account_number[-4:]
