from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_text, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from .model import EmployeeProfile, User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    full_name: str
    role: Role


def employee_view(user: User) -> dict:
    return {
        "id": str(user.user_id),
        "fullName": user.full_name,
        "fullNameArabic": user.full_name_arabic or "",
        "username": user.username,
        "email": user.email or "",
        "phoneNumber": user.phone_number or "",
        "employeeCode": user.employee_code or "N/A",
        "fingerprintCode": user.fingerprint_code or "",
        "branch": user.branch or "",
        "title": user.title or "",
        "role": user.role.value,
    }


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        user = self._users.get_by_username((username or "").strip())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid username or password")

        return SessionUser(user_id=user.user_id, full_name=user.full_name, role=user.role)


class UserService:
    """Use case: manage employee records (admin) and own profile."""

    def __init__(self, users: UserRepository, *, default_password: str = "ChangeMe123"):
        self._users = users
        self._default_password = default_password

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

    @staticmethod
    def _clean_profile(profile: EmployeeProfile) -> EmployeeProfile:
        return EmployeeProfile(
            full_name=require_non_empty(profile.full_name, "Full name"),
            full_name_arabic=optional_text(profile.full_name_arabic),
            email=optional_text(profile.email),
            phone_number=optional_text(profile.phone_number),
            employee_code=require_non_empty(profile.employee_code, "Employee code"),
            fingerprint_code=optional_text(profile.fingerprint_code),
            branch=optional_text(profile.branch),
            title=optional_text(profile.title),
        )

    def list_employees(self) -> list[dict]:
        return [employee_view(u) for u in self._users.list_by_role(Role.EMPLOYEE)]

    def create_employee(self, *, current_role: Role, profile: EmployeeProfile, username: str = "") -> int:
        self._require_admin(current_role)
        profile = self._clean_profile(profile)
        username = (username or "").strip() or (profile.email or profile.employee_code).lower()

        if self._users.get_by_username(username):
            raise ValidationError("Username already exists")
        if self._users.get_by_employee_code(profile.employee_code):
            raise ValidationError("Employee code already exists")

        user_id = self._users.create_user(
            username=username,
            password_hash=generate_password_hash(self._default_password),
            role=Role.EMPLOYEE,
            profile=profile,
        )
        logger.info("created employee %s (%s)", user_id, profile.employee_code)
        return user_id

    def update_employee(self, *, current_role: Role, user_id: int, profile: EmployeeProfile) -> None:
        self._require_admin(current_role)
        profile = self._clean_profile(profile)

        user = self._users.get_by_id(int(user_id))
        if not user:
            raise ValidationError("Employee not found")

        other = self._users.get_by_employee_code(profile.employee_code)
        if other and other.user_id != user.user_id:
            raise ValidationError("Employee code already exists")

        if not self._users.update_profile(user.user_id, profile):
            raise ValidationError("Failed to update employee")

    def delete_employee(self, *, current_role: Role, user_id: int) -> None:
        self._require_admin(current_role)

        user = self._users.get_by_id(int(user_id))
        if not user:
            raise ValidationError("Employee not found")
        if user.role == Role.ADMIN:
            raise ValidationError("Admin accounts cannot be deleted")

        if not self._users.delete_by_id(user.user_id):
            raise ValidationError("Failed to delete employee")
        logger.info("deleted employee %s", user.user_id)

    def get_profile(self, *, user_id: int) -> dict:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise ValidationError("User not found")
        return employee_view(user)

    def change_password(self, *, user_id: int, current_password: str, new_password: str) -> None:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise ValidationError("User not found")

        try:
            ok = check_password_hash(user.password_hash, current_password or "")
        except ValueError:
            ok = False
        if not ok:
            raise ValidationError("Current password is incorrect")

        require_min_length(new_password, "New password", MIN_PASSWORD_LENGTH)
        if not self._users.set_password_hash(user.user_id, generate_password_hash(new_password)):
            raise ValidationError("Failed to change password")


def profile_from_payload(payload: Optional[dict]) -> EmployeeProfile:
    data = payload or {}
    return EmployeeProfile(
        full_name=str(data.get("fullName") or ""),
        full_name_arabic=data.get("fullNameArabic"),
        email=data.get("email"),
        phone_number=data.get("phoneNumber"),
        employee_code=data.get("employeeCode"),
        fingerprint_code=data.get("fingerprintCode"),
        branch=data.get("branch"),
        title=data.get("title"),
    )
