from __future__ import annotations

from typing import Dict, FrozenSet, Iterable

from ..core.enums import Capability, Role

ROLE_CAPABILITIES: Dict[Role, FrozenSet[Capability]] = {
    Role.SUPERADMIN: frozenset(
        {
            Capability.APPROVE_ANY,
            Capability.FORCE_APPROVE,
            Capability.VIEW_ALL,
            Capability.DELETE_ANY,
            Capability.MANAGE_OFFSET_BANK,
            Capability.MANAGE_LEAVE_BANK,
            Capability.MANAGE_BIOMETRICS,
        }
    ),
    Role.HRD_MANAGER: frozenset(
        {
            Capability.APPROVE_ANY,
            Capability.VIEW_ALL,
            Capability.DELETE_ANY,
            Capability.MANAGE_OFFSET_BANK,
            Capability.MANAGE_LEAVE_BANK,
            Capability.MANAGE_BIOMETRICS,
        }
    ),
    Role.DEPARTMENT_MANAGER: frozenset({Capability.APPROVE_DEPARTMENT}),
    Role.EMPLOYEE: frozenset(),
}


def capabilities_for(roles: Iterable[Role]) -> FrozenSet[Capability]:
    caps: set[Capability] = set()
    for role in roles:
        caps |= ROLE_CAPABILITIES.get(role, frozenset())
    return frozenset(caps)
