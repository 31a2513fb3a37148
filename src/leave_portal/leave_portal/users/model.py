from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role
from ..scheduling.model import EmployeeRef


@dataclass(frozen=True)
class User:
    """Domain entity: a portal account, which is also the employee record.

    Plain data object (no DB access code).
    """

    user_id: int
    full_name: str
    username: str
    password_hash: str
    role: Role
    employee_code: Optional[str] = None
    full_name_arabic: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    fingerprint_code: Optional[str] = None
    branch: Optional[str] = None
    title: Optional[str] = None
    is_active: bool = True

    def as_employee_ref(self) -> EmployeeRef:
        return EmployeeRef(id=str(self.user_id), full_name=self.full_name, code=self.employee_code or "N/A")


@dataclass(frozen=True)
class EmployeeProfile:
    """Editable employee fields coming from the admin form."""

    full_name: str
    full_name_arabic: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    employee_code: Optional[str] = None
    fingerprint_code: Optional[str] = None
    branch: Optional[str] = None
    title: Optional[str] = None
