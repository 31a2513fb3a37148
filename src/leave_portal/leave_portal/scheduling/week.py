from __future__ import annotations

from datetime import date, timedelta

from ..common.datetime_utils import week_day_index
from ..core.constants import DAYS_IN_WEEK, HOLIDAY_WEEKDAY
from .model import DaySlot, WeekWindow


class WeekWindowResolver:
    """Map (reference date, week offset) to a Saturday-Friday week window.

    Works on plain ``datetime.date`` values only, so there is no time zone
    conversion that could move a date across local midnight. Offset 0 is the
    week containing ``reference``; each unit shifts the window by seven days.
    Friday is the fixed weekly holiday.
    """

    def resolve(self, reference: date, week_offset: int = 0) -> WeekWindow:
        start = reference - timedelta(days=week_day_index(reference))
        start += timedelta(weeks=int(week_offset))

        days = tuple(self._slot(start + timedelta(days=i)) for i in range(DAYS_IN_WEEK))
        return WeekWindow(start=start, end=days[-1].date, days=days)

    @staticmethod
    def _slot(value: date) -> DaySlot:
        # English short names regardless of host locale.
        short_name = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")[value.weekday()]
        return DaySlot(date=value, short_name=short_name, is_holiday=value.weekday() == HOLIDAY_WEEKDAY)
