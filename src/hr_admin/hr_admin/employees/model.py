from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Employee record. `idno` is also the user id enrolled on biometric devices."""

    employee_id: int
    idno: str
    last_name: str
    first_name: str
    department: Optional[str]
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.last_name}, {self.first_name}"
