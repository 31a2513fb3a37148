from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterator, Mapping

from ..core.enums import AssignmentType


@dataclass(frozen=True)
class DaySlot:
    date: date
    short_name: str
    is_holiday: bool


@dataclass(frozen=True)
class WeekWindow:
    """Seven consecutive days, Saturday through Friday."""

    start: date
    end: date
    days: tuple[DaySlot, ...]

    def working_days(self) -> list[date]:
        return [slot.date for slot in self.days if not slot.is_holiday]


@dataclass(frozen=True)
class EmployeeRef:
    id: str
    full_name: str
    code: str


@dataclass(frozen=True)
class WFHAssignment:
    employee_id: str
    date: date
    type: AssignmentType = AssignmentType.WFH


@dataclass(frozen=True)
class AssignmentPlan:
    """Randomly allocated WFH days per employee, before persistence."""

    window: WeekWindow
    days_per_employee: int
    assignments: Mapping[EmployeeRef, tuple[date, ...]] = field(default_factory=dict)

    def pairs(self) -> Iterator[tuple[EmployeeRef, date]]:
        for employee, days in self.assignments.items():
            for day in days:
                yield employee, day

    def to_assignments(self) -> list[WFHAssignment]:
        return [WFHAssignment(employee_id=employee.id, date=day) for employee, day in self.pairs()]

    @property
    def total_days(self) -> int:
        return sum(len(days) for days in self.assignments.values())
