from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol

from .model import LeaveBank


class LeaveBankRepository(Protocol):
    def get(self, employee_id: int, leave_type: str, year: int) -> Optional[LeaveBank]:
        raise NotImplementedError

    def open(self, employee_id: int, leave_type: str, year: int, days: Decimal, *, notes: str, now: datetime) -> None:
        """Create the bank with `days` unless it already exists."""

        raise NotImplementedError

    def add_days(self, employee_id: int, leave_type: str, year: int, days: Decimal, *, notes: str, now: datetime) -> None:
        raise NotImplementedError

    def use_days(self, employee_id: int, leave_type: str, year: int, days: Decimal, *, notes: str, now: datetime) -> bool:
        """Use days only if enough remain; False leaves the bank untouched."""

        raise NotImplementedError
