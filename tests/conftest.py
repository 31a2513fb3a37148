from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.leave_portal.leave_portal.core.enums import RequestStatus, Role
from src.leave_portal.leave_portal.requests.model import NewRequest, TimeOffRequest
from src.leave_portal.leave_portal.users.model import EmployeeProfile, User


class InMemoryUsers:
    def __init__(self, users=()):
        self._users: dict[int, User] = {u.user_id: u for u in users}
        self._next_id = max(self._users, default=0) + 1

    def add(self, user: User) -> User:
        self._users[user.user_id] = user
        self._next_id = max(self._next_id, user.user_id + 1)
        return user

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._users.get(int(user_id))

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.username == username), None)

    def get_by_employee_code(self, employee_code: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.employee_code == employee_code), None)

    def get_many(self, user_ids):
        return [self._users[i] for i in user_ids if i in self._users]

    def list_by_role(self, role: Role):
        return sorted((u for u in self._users.values() if u.role == role), key=lambda u: u.full_name)

    def create_user(self, *, username: str, password_hash: str, role: Role, profile: EmployeeProfile) -> int:
        uid = self._next_id
        self._next_id += 1
        self._users[uid] = User(
            user_id=uid,
            full_name=profile.full_name,
            username=username,
            password_hash=password_hash,
            role=role,
            employee_code=profile.employee_code,
            full_name_arabic=profile.full_name_arabic,
            email=profile.email,
            phone_number=profile.phone_number,
            fingerprint_code=profile.fingerprint_code,
            branch=profile.branch,
            title=profile.title,
        )
        return uid

    def update_profile(self, user_id: int, profile: EmployeeProfile) -> bool:
        user = self._users.get(int(user_id))
        if not user:
            return False
        self._users[user.user_id] = User(
            user_id=user.user_id,
            full_name=profile.full_name,
            username=user.username,
            password_hash=user.password_hash,
            role=user.role,
            employee_code=profile.employee_code,
            full_name_arabic=profile.full_name_arabic,
            email=profile.email,
            phone_number=profile.phone_number,
            fingerprint_code=profile.fingerprint_code,
            branch=profile.branch,
            title=profile.title,
        )
        return True

    def set_password_hash(self, user_id: int, password_hash: str) -> bool:
        user = self._users.get(int(user_id))
        if not user:
            return False
        self._users[user.user_id] = replace(user, password_hash=password_hash)
        return True

    def delete_by_id(self, user_id: int) -> bool:
        return self._users.pop(int(user_id), None) is not None


class InMemoryRequests:
    def __init__(self, users: InMemoryUsers, *, fail_after: Optional[int] = None):
        self._users = users
        self._rows: dict[int, TimeOffRequest] = {}
        self._next_id = 1
        self.fail_after = fail_after

    def create(self, new: NewRequest) -> int:
        if self.fail_after is not None and len(self._rows) >= self.fail_after:
            raise ConnectionError("database went away")
        rid = self._next_id
        self._next_id += 1
        employee = self._users.get_by_id(new.employee_id)
        self._rows[rid] = TimeOffRequest(
            request_id=rid,
            employee_id=int(new.employee_id),
            employee_name=employee.full_name if employee else "Unknown",
            type=new.type,
            start_date=new.start_date,
            end_date=new.end_date,
            number_of_days=new.number_of_days,
            notes=new.notes,
            status=new.status,
            source=new.source,
            created_at=datetime(2024, 6, 1, 9, 0),
            decided_by=new.decided_by,
            fingerprint_code=employee.fingerprint_code if employee else None,
        )
        return rid

    def all(self) -> list[TimeOffRequest]:
        return list(self._rows.values())

    def get(self, *, request_id: int) -> Optional[TimeOffRequest]:
        return self._rows.get(int(request_id))

    def list_requests(self, *, status=None, employee_id=None, limit=200):
        rows = [
            r
            for r in self._rows.values()
            if (status is None or r.status == status) and (employee_id is None or r.employee_id == employee_id)
        ]
        rows.sort(key=lambda r: r.request_id, reverse=True)
        return rows[:limit]

    def list_in_range(self, *, start, end, types, statuses, employee_id=None):
        rows = [
            r
            for r in self._rows.values()
            if r.start_date <= end
            and r.end_date >= start
            and r.type in types
            and r.status in statuses
            and (employee_id is None or r.employee_id == int(employee_id))
        ]
        return sorted(rows, key=lambda r: (r.employee_name, r.start_date))

    def decide(self, *, request_id, status, decided_by) -> bool:
        req = self._rows.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        self._rows[req.request_id] = TimeOffRequest(
            request_id=req.request_id,
            employee_id=req.employee_id,
            employee_name=req.employee_name,
            type=req.type,
            start_date=req.start_date,
            end_date=req.end_date,
            number_of_days=req.number_of_days,
            notes=req.notes,
            status=status,
            source=req.source,
            created_at=req.created_at,
            decided_by=int(decided_by),
            decided_at=datetime(2024, 6, 1, 10, 0),
            fingerprint_code=req.fingerprint_code,
        )
        return True

    def delete(self, *, request_id) -> bool:
        return self._rows.pop(int(request_id), None) is not None

    def delete_by_status(self, *, status) -> int:
        ids = [rid for rid, r in self._rows.items() if r.status == status]
        for rid in ids:
            del self._rows[rid]
        return len(ids)

    def list_export_rows(self, *, status):
        out = []
        for r in sorted(self._rows.values(), key=lambda r: (r.start_date, r.employee_name)):
            if r.status != status:
                continue
            employee = self._users.get_by_id(r.employee_id)
            out.append(
                {
                    "request_id": r.request_id,
                    "employee_code": employee.employee_code or "",
                    "fingerprint_code": employee.fingerprint_code or "",
                    "employee_name": employee.full_name,
                    "title": employee.title or "",
                    "branch": employee.branch or "",
                    "type": r.type.value,
                    "notes": r.notes or "",
                    "start_date": r.start_date,
                    "end_date": r.end_date,
                    "number_of_days": r.number_of_days,
                }
            )
        return out


def make_user(user_id: int, full_name: str, role: Role = Role.EMPLOYEE, *, password: str = "secret123", **extra) -> User:
    return User(
        user_id=user_id,
        full_name=full_name,
        username=extra.pop("username", full_name.split()[0].lower()),
        password_hash=generate_password_hash(password),
        role=role,
        employee_code=extra.pop("employee_code", f"EMP-{user_id:03d}"),
        **extra,
    )


@pytest.fixture
def fixed_today() -> date:
    # Wednesday
    return date(2024, 6, 12)


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers(
        [
            make_user(1, "Admin Demo", Role.ADMIN, username="admin", password="admin123"),
            make_user(2, "Omar Hassan", fingerprint_code="1001", title="Developer", branch="Head Office"),
            make_user(3, "Mona Adel", fingerprint_code="1002", title="Accountant", branch="Alexandria"),
            make_user(4, "HR Demo", Role.HR, username="hr"),
        ]
    )


@pytest.fixture
def requests_repo(users_repo) -> InMemoryRequests:
    return InMemoryRequests(users_repo)
