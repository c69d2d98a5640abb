from __future__ import annotations

import logging

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import Actor, User
from .permissions import capabilities_for
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate a user and resolve the per-request actor."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> Actor:
        username = require_non_empty(username, "Username", field="username")
        user = self._users.get_by_username(username)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # Placeholder or corrupted hashes in the users table.
            ok = False

        if not ok:
            logger.info("Failed login for %s", username)
            raise AuthenticationError("Invalid username or password")

        return self._build_actor(user)

    def resolve_actor(self, user_id: int) -> Actor:
        user = self._users.get_by_id(int(user_id))
        if not user or not user.is_active:
            raise AuthenticationError("Your session has expired, please log in again")
        return self._build_actor(user)

    def _build_actor(self, user: User) -> Actor:
        roles = set(self._users.get_roles(user.user_id))
        managed = self._users.get_managed_departments(user.user_id)
        # Assignment in department_managers makes a user a manager even without the role row.
        if managed:
            roles.add(Role.DEPARTMENT_MANAGER)
        if user.employee_id is not None:
            roles.add(Role.EMPLOYEE)

        return Actor(
            user_id=user.user_id,
            name=user.name,
            employee_id=user.employee_id,
            roles=frozenset(roles),
            capabilities=capabilities_for(roles),
            managed_departments=managed,
        )
