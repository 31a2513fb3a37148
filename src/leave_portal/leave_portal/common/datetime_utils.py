from __future__ import annotations

from datetime import date, datetime

from ..core.constants import WEEK_START_WEEKDAY
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def format_iso_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch/mock easier.
    """
    return date.today()


def week_day_index(value: date) -> int:
    """Position of ``value`` inside a Saturday-first week.

    ``date.weekday()`` counts from Monday; the office week starts on Saturday,
    so Saturday maps to 0, Sunday to 1, ... and Friday to 6.
    """
    return (value.weekday() - WEEK_START_WEEKDAY) % 7
