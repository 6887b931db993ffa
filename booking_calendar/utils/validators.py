"""
Date input parsing for the calendar boundary.

The rule engine only works with `datetime.date`; raw values coming from forms
or client events are converted here.
"""

from datetime import date, datetime
from typing import Optional

from booking_calendar.core.exceptions import InvalidDateInput


def parse_date_input(value: object) -> date:
    """
    Parse a calendar day.

    Accepts date / datetime objects, "YYYY-MM-DD" and ISO timestamps such as
    "2026-01-05T00:00:00Z" (only the date part is used).
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDateInput(value, f"unsupported type {type(value).__name__}")

    text = value.strip()
    if not text:
        raise InvalidDateInput(value, "empty value")

    date_part = text.split("T", 1)[0]
    try:
        return datetime.strptime(date_part, "%Y-%m-%d").date()
    except ValueError as e:
        raise InvalidDateInput(value, str(e)) from e


def parse_optional_date(value: object) -> Optional[date]:
    """Same as parse_date_input, but None and "" mean "not set"."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_date_input(value)
