from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import BiometricDevice, ProcessedAttendance


class BiometricRepository(Protocol):
    def get_device(self, device_id: int) -> Optional[BiometricDevice]:
        raise NotImplementedError

    def upsert_attendance(self, rows: Sequence[ProcessedAttendance]) -> int:
        """Insert or replace one row per (employee_id, attendance_date); returns rows written."""

        raise NotImplementedError

    def touch_last_sync(self, device_id: int, synced_at: datetime) -> None:
        raise NotImplementedError
