from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import EmployeeProfile, User
from .repository import UserRepository

_COLUMNS = """
    user_id, full_name, full_name_arabic, username, password_hash, role,
    email, phone_number, employee_code, fingerprint_code, branch, title, is_active
"""


def _to_user(row: Dict[str, Any]) -> User:
    return User(
        user_id=int(row["user_id"]),
        full_name=row["full_name"],
        username=row["username"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        employee_code=row.get("employee_code"),
        full_name_arabic=row.get("full_name_arabic"),
        email=row.get("email"),
        phone_number=row.get("phone_number"),
        fingerprint_code=row.get("fingerprint_code"),
        branch=row.get("branch"),
        title=row.get("title"),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value: object) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE {where}=%s", (value,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one("user_id", int(user_id))

    def get_by_username(self, username: str) -> Optional[User]:
        return self._get_one("username", username)

    def get_by_employee_code(self, employee_code: str) -> Optional[User]:
        return self._get_one("employee_code", employee_code)

    def get_many(self, user_ids: Sequence[int]) -> Sequence[User]:
        if not user_ids:
            return []
        ids = [int(i) for i in user_ids]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id IN ({in_clause(ids)})", tuple(ids))
            return [_to_user(r) for r in fetchall(cur)]

    def list_by_role(self, role: Role) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE role=%s AND is_active=1 ORDER BY full_name ASC",
                (role.value,),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def create_user(self, *, username: str, password_hash: str, role: Role, profile: EmployeeProfile) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(
                    full_name, full_name_arabic, username, password_hash, role, email,
                    phone_number, employee_code, fingerprint_code, branch, title, is_active
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,1)
                """,
                (
                    profile.full_name,
                    profile.full_name_arabic,
                    username,
                    password_hash,
                    role.value,
                    profile.email,
                    profile.phone_number,
                    profile.employee_code,
                    profile.fingerprint_code,
                    profile.branch,
                    profile.title,
                ),
            )
            return int(cur.lastrowid)

    def update_profile(self, user_id: int, profile: EmployeeProfile) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET full_name=%s, full_name_arabic=%s, email=%s, phone_number=%s,
                    employee_code=%s, fingerprint_code=%s, branch=%s, title=%s
                WHERE user_id=%s
                """,
                (
                    profile.full_name,
                    profile.full_name_arabic,
                    profile.email,
                    profile.phone_number,
                    profile.employee_code,
                    profile.fingerprint_code,
                    profile.branch,
                    profile.title,
                    int(user_id),
                ),
            )
            # MySQL reports 0 affected rows when values are unchanged.
            cur.execute("SELECT 1 AS ok FROM users WHERE user_id=%s", (int(user_id),))
            return fetchone(cur) is not None

    def set_password_hash(self, user_id: int, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET password_hash=%s WHERE user_id=%s", (password_hash, int(user_id)))
            return cur.rowcount > 0

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0
