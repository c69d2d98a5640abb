from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol

from .model import OffsetBank


class OffsetBankRepository(Protocol):
    def get(self, employee_id: int) -> Optional[OffsetBank]:
        raise NotImplementedError

    def credit(
        self,
        employee_id: int,
        hours: Decimal,
        *,
        notes: str,
        now: datetime,
        offset_id: Optional[int] = None,
    ) -> None:
        """Add hours, creating the bank if needed. Marks the offset as posted when given."""

        raise NotImplementedError

    def debit(
        self,
        employee_id: int,
        hours: Decimal,
        *,
        notes: str,
        now: datetime,
        offset_id: Optional[int] = None,
    ) -> bool:
        """Use hours only if enough remain; False leaves the bank untouched."""

        raise NotImplementedError
