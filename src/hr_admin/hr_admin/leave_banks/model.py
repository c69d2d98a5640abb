from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class LeaveBank:
    """Paid leave days of one employee for one leave type and year."""

    employee_id: int
    leave_type: str
    year: int
    total_days: Decimal = Decimal("0")
    used_days: Decimal = Decimal("0")
    notes: Optional[str] = None
    last_updated: Optional[datetime] = None

    @property
    def remaining_days(self) -> Decimal:
        return self.total_days - self.used_days

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "leave_type": self.leave_type,
            "year": self.year,
            "total_days": float(self.total_days),
            "used_days": float(self.used_days),
            "remaining_days": float(self.remaining_days),
            "notes": self.notes,
            "last_updated": self.last_updated.strftime("%Y-%m-%d %H:%M:%S") if self.last_updated else None,
        }
