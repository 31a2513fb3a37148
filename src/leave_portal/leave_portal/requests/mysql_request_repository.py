from __future__ import annotations

from datetime import date
from typing import Any, Collection, Dict, Optional, Sequence

from ..core.enums import RequestSource, RequestStatus, RequestType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import NewRequest, TimeOffRequest
from .repository import RequestRepository

_SELECT = """
    SELECT r.request_id, r.employee_id, u.full_name, u.fingerprint_code,
           r.request_type, r.start_date, r.end_date, r.number_of_days, r.notes,
           r.status, r.source, r.created_at, r.decided_by, r.decided_at
    FROM time_off_requests r
    JOIN users u ON u.user_id = r.employee_id
"""


def _to_request(r: Dict[str, Any]) -> TimeOffRequest:
    return TimeOffRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        employee_name=r["full_name"],
        type=RequestType(r["request_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        number_of_days=int(r["number_of_days"]),
        notes=r.get("notes"),
        status=RequestStatus(r["status"]),
        source=RequestSource(r["source"]),
        created_at=r["created_at"],
        decided_by=r.get("decided_by"),
        decided_at=r.get("decided_at"),
        fingerprint_code=r.get("fingerprint_code"),
    )


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, new: NewRequest) -> int:
        decided = new.status != RequestStatus.PENDING
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_off_requests(
                    employee_id, request_type, start_date, end_date, number_of_days,
                    notes, status, source, decided_by, decided_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s, IF(%s, NOW(), NULL))
                """,
                (
                    int(new.employee_id),
                    new.type.value,
                    new.start_date,
                    new.end_date,
                    int(new.number_of_days),
                    new.notes,
                    new.status.value,
                    new.source.value,
                    new.decided_by,
                    decided,
                ),
            )
            return int(cur.lastrowid)

    def get(self, *, request_id: int) -> Optional[TimeOffRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE r.request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[TimeOffRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("r.status=%s")
            params.append(status.value)
        if employee_id is not None:
            clauses.append("r.employee_id=%s")
            params.append(int(employee_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {where} ORDER BY r.created_at DESC, r.request_id DESC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_in_range(
        self,
        *,
        start: date,
        end: date,
        types: Collection[RequestType],
        statuses: Collection[RequestStatus],
        employee_id: Optional[int] = None,
    ) -> Sequence[TimeOffRequest]:
        if not types or not statuses:
            return []
        type_values = [t.value for t in types]
        status_values = [s.value for s in statuses]
        params: list[Any] = [end, start] + type_values + status_values
        employee_filter = ""
        if employee_id is not None:
            employee_filter = "AND r.employee_id = %s"
            params.append(int(employee_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + f"""
                WHERE r.start_date <= %s AND r.end_date >= %s
                  AND r.request_type IN ({in_clause(type_values)})
                  AND r.status IN ({in_clause(status_values)})
                  {employee_filter}
                ORDER BY u.full_name ASC, r.start_date ASC
                """,
                tuple(params),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def decide(self, *, request_id: int, status: RequestStatus, decided_by: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_off_requests
                SET status=%s, decided_by=%s, decided_at=NOW()
                WHERE request_id=%s AND status=%s
                """,
                (status.value, int(decided_by), int(request_id), RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def delete(self, *, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM time_off_requests WHERE request_id=%s", (int(request_id),))
            return cur.rowcount > 0

    def delete_by_status(self, *, status: RequestStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM time_off_requests WHERE status=%s", (status.value,))
            return int(cur.rowcount)

    def list_export_rows(self, *, status: RequestStatus) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT r.request_id, u.employee_code, u.fingerprint_code, u.full_name,
                       u.title, u.branch, r.request_type, r.notes,
                       r.start_date, r.end_date, r.number_of_days
                FROM time_off_requests r
                JOIN users u ON u.user_id = r.employee_id
                WHERE r.status=%s
                ORDER BY r.start_date ASC, u.full_name ASC
                """,
                (status.value,),
            )
            out: list[dict] = []
            for r in fetchall(cur):
                out.append(
                    {
                        "request_id": int(r["request_id"]),
                        "employee_code": r.get("employee_code") or "",
                        "fingerprint_code": r.get("fingerprint_code") or "",
                        "employee_name": r["full_name"],
                        "title": r.get("title") or "",
                        "branch": r.get("branch") or "",
                        "type": r["request_type"],
                        "notes": r.get("notes") or "",
                        "start_date": r["start_date"],
                        "end_date": r["end_date"],
                        "number_of_days": int(r["number_of_days"]),
                    }
                )
            return out
