from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from ..core.enums import Capability, Role


@dataclass(frozen=True)
class User:
    """Login account. `employee_id` links the account to an employee record."""

    user_id: int
    name: str
    username: str
    password_hash: str
    employee_id: Optional[int]
    is_active: bool = True


@dataclass(frozen=True)
class Actor:
    """The authenticated caller, resolved once per HTTP request."""

    user_id: int
    name: str
    employee_id: Optional[int]
    roles: FrozenSet[Role] = field(default_factory=frozenset)
    capabilities: FrozenSet[Capability] = field(default_factory=frozenset)
    managed_departments: FrozenSet[str] = field(default_factory=frozenset)

    def can(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def manages(self, department: Optional[str]) -> bool:
        return (
            department is not None
            and self.can(Capability.APPROVE_DEPARTMENT)
            and department in self.managed_departments
        )

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "name": self.name,
            "employee_id": self.employee_id,
            "roles": sorted(r.value for r in self.roles),
            "capabilities": sorted(c.value for c in self.capabilities),
            "managed_departments": sorted(self.managed_departments),
        }
