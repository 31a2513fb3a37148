from __future__ import annotations

import logging
import random
from typing import Optional, Sequence

from ..core.constants import MAX_DAYS_PER_EMPLOYEE, MIN_DAYS_PER_EMPLOYEE
from ..core.exceptions import ValidationError
from .model import AssignmentPlan, EmployeeRef, WeekWindow

logger = logging.getLogger(__name__)


class RandomAssignmentPlanner:
    """Pick random WFH days for each employee inside a week window.

    Every employee gets ``days_per_employee`` distinct working (non-holiday)
    days, drawn uniformly without replacement. Draws are independent per
    employee, so several employees may share the same day.

    The random source is injected; pass ``random.Random(seed)`` for a
    reproducible plan.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng if rng is not None else random.Random()

    def plan(self, roster: Sequence[EmployeeRef], days_per_employee: int, window: WeekWindow) -> AssignmentPlan:
        available = sorted(window.working_days())
        self._validate(roster, days_per_employee, len(available))

        assignments = {
            employee: tuple(sorted(self._rng.sample(available, days_per_employee))) for employee in roster
        }
        plan = AssignmentPlan(window=window, days_per_employee=days_per_employee, assignments=assignments)
        logger.debug(
            "planned %d WFH days for %d employees in week %s..%s",
            plan.total_days,
            len(roster),
            window.start,
            window.end,
        )
        return plan

    @staticmethod
    def _validate(roster: Sequence[EmployeeRef], days_per_employee: int, available: int) -> None:
        if not roster:
            raise ValidationError("Please select at least one employee")

        seen: set[str] = set()
        for employee in roster:
            if employee.id in seen:
                raise ValidationError(f"Employee {employee.id} is selected more than once")
            seen.add(employee.id)

        if isinstance(days_per_employee, bool) or not isinstance(days_per_employee, int):
            raise ValidationError("Days per employee must be a whole number")
        if not MIN_DAYS_PER_EMPLOYEE <= days_per_employee <= MAX_DAYS_PER_EMPLOYEE:
            raise ValidationError(
                f"Days per employee must be between {MIN_DAYS_PER_EMPLOYEE} and {MAX_DAYS_PER_EMPLOYEE}"
            )
        if days_per_employee > available:
            raise ValidationError(f"Only {available} working days are available in this week")
