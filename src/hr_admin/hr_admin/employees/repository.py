from __future__ import annotations

from typing import Dict, Iterable, Optional, Protocol

from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def map_by_idno(self, idnos: Iterable[str]) -> Dict[str, Employee]:
        """Look up many employees by biometric id in one round trip."""

        raise NotImplementedError
