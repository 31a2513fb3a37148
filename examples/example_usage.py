"""Example: plan a random WFH week with the scheduling layer (no Flask, no DB)."""

import random
from datetime import date

from src.leave_portal.leave_portal.scheduling.model import EmployeeRef
from src.leave_portal.leave_portal.scheduling.planner import RandomAssignmentPlanner
from src.leave_portal.leave_portal.scheduling.week import WeekWindowResolver


def main():
    window = WeekWindowResolver().resolve(date.today(), week_offset=1)
    roster = [
        EmployeeRef(id="1", full_name="Omar Hassan", code="EMP-001"),
        EmployeeRef(id="2", full_name="Mona Adel", code="EMP-002"),
    ]
    plan = RandomAssignmentPlanner(random.Random(42)).plan(roster, 2, window)

    print(f"Week {window.start} .. {window.end}")
    for employee, days in plan.assignments.items():
        print(employee.full_name, [d.isoformat() for d in days])


if __name__ == "__main__":
    main()
