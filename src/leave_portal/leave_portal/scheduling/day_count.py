from __future__ import annotations

from datetime import date
from typing import Iterable

from ..core.exceptions import ValidationError


def days_in_range(start: date, end: date) -> int:
    """Number of calendar days in ``start..end``, both ends included."""
    if end < start:
        raise ValidationError("End date must be after or equal to start date")
    return (end - start).days + 1


def count_days(ranges: Iterable[tuple[date, date]]) -> int:
    """Total days over several ranges.

    Ranges are neither merged nor deduplicated: the manual WFH form allows one
    row per day, and overlapping rows count once each.
    """
    return sum(days_in_range(start, end) for start, end in ranges)
