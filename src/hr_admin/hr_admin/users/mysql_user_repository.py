from __future__ import annotations

import logging
from typing import FrozenSet, Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)

_USER_COLUMNS = "id, name, username, password_hash, employee_id, is_active"


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["id"]),
        name=row["name"],
        username=row["username"],
        password_hash=row["password_hash"],
        employee_id=int(row["employee_id"]) if row.get("employee_id") is not None else None,
        is_active=bool(row.get("is_active", True)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE username=%s", (username,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_roles(self, user_id: int) -> FrozenSet[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT role FROM user_roles WHERE user_id=%s", (int(user_id),))
            roles: set[Role] = set()
            for row in fetchall(cur):
                try:
                    roles.add(Role(row["role"]))
                except ValueError:
                    logger.warning("Ignoring unknown role %r for user %s", row["role"], user_id)
            return frozenset(roles)

    def get_managed_departments(self, user_id: int) -> FrozenSet[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT department FROM department_managers WHERE manager_id=%s", (int(user_id),))
            return frozenset(str(row["department"]) for row in fetchall(cur))
