from __future__ import annotations

from typing import FrozenSet, Optional, Protocol

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for accounts, roles and department assignments."""

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def get_roles(self, user_id: int) -> FrozenSet[Role]:
        raise NotImplementedError

    def get_managed_departments(self, user_id: int) -> FrozenSet[str]:
        raise NotImplementedError
