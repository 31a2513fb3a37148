from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import format_iso_date, today_local
from ..common.validators import optional_text
from ..core.constants import ADMIN_LIST_LIMIT, DEFAULT_LIST_LIMIT
from ..core.enums import AssignmentType, RequestSource, RequestStatus, RequestType, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..scheduling.day_count import count_days, days_in_range
from ..scheduling.model import EmployeeRef, WeekWindow, WFHAssignment
from ..scheduling.planner import RandomAssignmentPlanner
from ..scheduling.week import WeekWindowResolver
from ..users.repository import UserRepository
from .model import NewRequest, TimeOffRequest
from .repository import RequestRepository

logger = logging.getLogger(__name__)

BULK_WFH_NOTE = "Randomly assigned work from home"
ADMIN_WFH_NOTE = "Work From Home"

# Request types that occupy a day on the weekly schedule.
SCHEDULE_TYPES = {
    RequestType.WFH: AssignmentType.WFH,
    RequestType.VACATION: AssignmentType.LEAVE,
}


def request_view(req: TimeOffRequest) -> dict:
    return {
        "id": str(req.request_id),
        "employeeId": str(req.employee_id),
        "employeeName": req.employee_name,
        "type": req.type.value,
        "startDate": format_iso_date(req.start_date),
        "endDate": format_iso_date(req.end_date),
        "numberOfDays": req.number_of_days,
        "notes": req.notes or "",
        "status": req.status.value,
        "source": req.source.value,
        "createdAt": req.created_at.strftime("%Y-%m-%d %H:%M"),
    }


def week_range_view(window: WeekWindow) -> dict:
    return {"start": format_iso_date(window.start), "end": format_iso_date(window.end)}


class RequestService:
    def __init__(
        self,
        requests: RequestRepository,
        users: UserRepository,
        *,
        planner: Optional[RandomAssignmentPlanner] = None,
        resolver: Optional[WeekWindowResolver] = None,
        clock: Callable[[], date] = today_local,
    ):
        self._requests = requests
        self._users = users
        self._planner = planner or RandomAssignmentPlanner()
        self._resolver = resolver or WeekWindowResolver()
        self._clock = clock

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

    @staticmethod
    def _parse_type(value) -> RequestType:
        try:
            return RequestType(value)
        except ValueError:
            raise ValidationError("Invalid request type")

    def _roster(self, employee_ids: Sequence[str]) -> list[EmployeeRef]:
        """Resolve selected ids to employee refs in the caller's order.

        Duplicates are kept so the planner can reject them.
        """
        try:
            ids = [int(i) for i in employee_ids]
        except (TypeError, ValueError):
            raise ValidationError("Invalid employee id")

        found = {u.user_id: u for u in self._users.get_many(sorted(set(ids)))}
        missing = [str(i) for i in ids if i not in found or found[i].role != Role.EMPLOYEE]
        if missing:
            raise ValidationError(f"Employee not found: {', '.join(missing)}")
        return [found[i].as_employee_ref() for i in ids]

    # -------- Submission --------
    def create_request(
        self,
        *,
        current_role: Role,
        user_id: int,
        request_type: str,
        start_date: date,
        end_date: date,
        notes: str = "",
    ) -> int:
        if current_role not in {Role.EMPLOYEE, Role.HR}:
            raise AuthorizationError("Admins add requests on behalf of employees")

        rtype = self._parse_type(request_type)
        request_id = self._requests.create(
            NewRequest(
                employee_id=int(user_id),
                type=rtype,
                start_date=start_date,
                end_date=end_date,
                number_of_days=days_in_range(start_date, end_date),
                notes=optional_text(notes),
            )
        )
        logger.info("employee %s submitted %s request %s", user_id, rtype.value, request_id)
        return request_id

    def create_for_employee(
        self,
        *,
        current_role: Role,
        admin_user_id: int,
        employee_id: int,
        request_type: str,
        date_ranges: Sequence[tuple[date, date]],
        notes: str = "",
    ) -> int:
        """Admin entry: one record spanning all ranges, counting every range's days."""
        self._require_admin(current_role)

        rtype = self._parse_type(request_type)
        if not date_ranges:
            raise ValidationError("At least one complete date range is required")
        number_of_days = count_days(date_ranges)

        employee = self._users.get_by_id(int(employee_id))
        if not employee:
            raise ValidationError("Employee not found")

        default_note = ADMIN_WFH_NOTE if rtype == RequestType.WFH else None
        request_id = self._requests.create(
            NewRequest(
                employee_id=employee.user_id,
                type=rtype,
                start_date=min(start for start, _ in date_ranges),
                end_date=max(end for _, end in date_ranges),
                number_of_days=number_of_days,
                notes=optional_text(notes) or default_note,
                status=RequestStatus.APPROVED,
                source=RequestSource.ADMIN_DIRECT,
                decided_by=int(admin_user_id),
            )
        )
        logger.info("admin %s added %s request %s for employee %s", admin_user_id, rtype.value, request_id, employee_id)
        return request_id

    # -------- Decisions --------
    def _decide(self, *, current_role: Role, admin_user_id: int, request_id: int, status: RequestStatus) -> None:
        self._require_admin(current_role)

        req = self._requests.get(request_id=int(request_id))
        if not req:
            raise ValidationError("Request not found")
        if req.status != RequestStatus.PENDING:
            raise ValidationError("Request has already been processed")

        if not self._requests.decide(request_id=int(request_id), status=status, decided_by=int(admin_user_id)):
            raise ValidationError("Failed to update request")
        logger.info("request %s %s by %s", request_id, status.value.lower(), admin_user_id)

    def approve(self, *, current_role: Role, admin_user_id: int, request_id: int) -> None:
        self._decide(
            current_role=current_role,
            admin_user_id=admin_user_id,
            request_id=request_id,
            status=RequestStatus.APPROVED,
        )

    def reject(self, *, current_role: Role, admin_user_id: int, request_id: int) -> None:
        self._decide(
            current_role=current_role,
            admin_user_id=admin_user_id,
            request_id=request_id,
            status=RequestStatus.REJECTED,
        )

    # -------- Listing / housekeeping --------
    def list_my_requests(self, *, user_id: int, limit: int = DEFAULT_LIST_LIMIT) -> list[dict]:
        return [request_view(r) for r in self._requests.list_requests(employee_id=int(user_id), limit=limit)]

    def list_all(
        self, *, current_role: Role, status: Optional[RequestStatus] = None, limit: int = ADMIN_LIST_LIMIT
    ) -> list[dict]:
        self._require_admin(current_role)
        return [request_view(r) for r in self._requests.list_requests(status=status, limit=limit)]

    def delete_request(self, *, current_role: Role, request_id: int) -> None:
        if current_role not in {Role.ADMIN, Role.HR}:
            raise AuthorizationError("You do not have permission")
        if not self._requests.delete(request_id=int(request_id)):
            raise ValidationError("Request not found")

    def delete_all_approved(self, *, current_role: Role) -> int:
        self._require_admin(current_role)
        deleted = self._requests.delete_by_status(status=RequestStatus.APPROVED)
        logger.warning("deleted %d approved requests", deleted)
        return deleted

    # -------- Weekly schedule --------
    def week_window(self, *, week_offset: int = 0, today: Optional[date] = None) -> WeekWindow:
        return self._resolver.resolve(today or self._clock(), int(week_offset))

    @staticmethod
    def _days_by_employee(
        window: WeekWindow, requests: Sequence[TimeOffRequest]
    ) -> dict[int, tuple[TimeOffRequest, dict[date, WFHAssignment]]]:
        """employee_id -> (first request, {day: assignment}) for the days inside ``window``."""
        per_employee: dict[int, tuple[TimeOffRequest, dict[date, WFHAssignment]]] = {}
        for req in requests:
            _, days = per_employee.setdefault(req.employee_id, (req, {}))
            kind = SCHEDULE_TYPES[req.type]
            for slot in window.days:
                day = slot.date
                if not req.start_date <= day <= req.end_date:
                    continue
                # Leave outranks WFH on the same day.
                if day not in days or kind == AssignmentType.LEAVE:
                    days[day] = WFHAssignment(employee_id=str(req.employee_id), date=day, type=kind)
        return per_employee

    def _approved_in_window(self, window: WeekWindow, employee_id: Optional[int] = None) -> Sequence[TimeOffRequest]:
        return self._requests.list_in_range(
            start=window.start,
            end=window.end,
            types=SCHEDULE_TYPES.keys(),
            statuses={RequestStatus.APPROVED},
            employee_id=employee_id,
        )

    def my_week(self, *, user_id: int, today: Optional[date] = None) -> list[dict]:
        """The employee's own WFH / leave days in the current week, by date."""
        window = self.week_window(today=today)
        per_employee = self._days_by_employee(window, self._approved_in_window(window, int(user_id)))
        _, days = per_employee.get(int(user_id), (None, {}))
        return [
            {"date": format_iso_date(day), "type": days[day].type.value}
            for day in sorted(days)
        ]

    def weekly_schedule(self, *, week_offset: int = 0, today: Optional[date] = None) -> dict:
        window = self.week_window(week_offset=week_offset, today=today)
        per_employee = self._days_by_employee(window, self._approved_in_window(window))

        employees = []
        for employee_id, (first, days) in per_employee.items():
            if not days:
                continue
            schedule = []
            for slot in window.days:
                assignment = days.get(slot.date)
                schedule.append(
                    {
                        "date": format_iso_date(slot.date),
                        "isWFH": assignment is not None,
                        "type": assignment.type.value if assignment else None,
                        "isHoliday": slot.is_holiday,
                    }
                )
            employees.append(
                {
                    "employeeId": str(employee_id),
                    "employeeName": first.employee_name,
                    "fingerprint": first.fingerprint_code or "",
                    "weekSchedule": schedule,
                }
            )

        return {
            "weekRange": week_range_view(window),
            "weekDays": [
                {"date": format_iso_date(slot.date), "dayShort": slot.short_name, "isHoliday": slot.is_holiday}
                for slot in window.days
            ],
            "employees": employees,
        }

    # -------- Random WFH generation --------
    def generate_random_wfh(
        self,
        *,
        current_role: Role,
        admin_user_id: int,
        employee_ids: Sequence[str],
        days_per_employee: int,
        week_offset: int = 0,
        today: Optional[date] = None,
    ) -> dict:
        """Assign random WFH days for the selected employees and persist them.

        One approved, single-day WFH record is created per (employee, day),
        marked as bulk-generated. Creation is not transactional: if the
        repository fails midway, records created so far stay and the error
        propagates, so callers should re-read the week before retrying.
        Existing requests in the week are not checked for collisions.
        """
        self._require_admin(current_role)

        roster = self._roster(employee_ids)
        window = self.week_window(week_offset=week_offset, today=today)
        plan = self._planner.plan(roster, days_per_employee, window)

        created = 0
        try:
            for employee, day in plan.pairs():
                self._requests.create(
                    NewRequest(
                        employee_id=int(employee.id),
                        type=RequestType.WFH,
                        start_date=day,
                        end_date=day,
                        number_of_days=1,
                        notes=BULK_WFH_NOTE,
                        status=RequestStatus.APPROVED,
                        source=RequestSource.BULK_GENERATED,
                        decided_by=int(admin_user_id),
                    )
                )
                created += 1
        except Exception:
            logger.error("random WFH generation stopped after %d of %d records", created, plan.total_days)
            raise

        logger.info(
            "admin %s generated %d WFH days for %d employees (%s..%s)",
            admin_user_id,
            created,
            len(roster),
            window.start,
            window.end,
        )
        return {
            "totalCreated": created,
            "weekRange": week_range_view(window),
            "assignments": [
                {
                    "employeeId": employee.id,
                    "employeeName": employee.full_name,
                    "employeeCode": employee.code,
                    "dates": [format_iso_date(d) for d in days],
                }
                for employee, days in plan.assignments.items()
            ],
        }
