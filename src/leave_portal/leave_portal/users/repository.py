from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import EmployeeProfile, User


class UserRepository(Protocol):
    """Repository interface for users.

    Services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_employee_code(self, employee_code: str) -> Optional[User]:
        raise NotImplementedError

    def get_many(self, user_ids: Sequence[int]) -> Sequence[User]:
        raise NotImplementedError

    def list_by_role(self, role: Role) -> Sequence[User]:
        raise NotImplementedError

    def create_user(self, *, username: str, password_hash: str, role: Role, profile: EmployeeProfile) -> int:
        raise NotImplementedError

    def update_profile(self, user_id: int, profile: EmployeeProfile) -> bool:
        raise NotImplementedError

    def set_password_hash(self, user_id: int, password_hash: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError
