from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class OffsetBank:
    """Banked offset hours of one employee."""

    employee_id: int
    total_hours: Decimal = Decimal("0")
    used_hours: Decimal = Decimal("0")
    remaining_hours: Decimal = Decimal("0")
    last_updated: Optional[datetime] = None
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "total_hours": float(self.total_hours),
            "used_hours": float(self.used_hours),
            "remaining_hours": float(self.remaining_hours),
            "last_updated": self.last_updated.strftime("%Y-%m-%d %H:%M:%S") if self.last_updated else None,
            "notes": self.notes,
        }
