from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import PunchStatus


@dataclass(frozen=True)
class BiometricDevice:
    device_id: int
    name: str
    ip_address: str
    port: int
    location: Optional[str] = None
    last_sync: Optional[datetime] = None


@dataclass(frozen=True)
class Punch:
    """One raw log entry read from a device. `user_id` is the enrolled id (employee idno)."""

    user_id: str
    timestamp: datetime


@dataclass(frozen=True)
class ClassifiedPunch:
    timestamp: datetime
    status: PunchStatus
    missing_punch: bool = False


@dataclass(frozen=True)
class ProcessedAttendance:
    """One employee-day built from that day's punches."""

    employee_id: int
    attendance_date: date
    time_in: Optional[datetime]
    time_out: Optional[datetime]
    break_in: Optional[datetime] = None
    break_out: Optional[datetime] = None
    hours_worked: Optional[Decimal] = None
    is_nightshift: bool = False
    source: str = "biometric"
    notes: Optional[str] = None


@dataclass(frozen=True)
class FetchResult:
    processed: int = 0
    skipped: int = 0
    saved: int = 0

    def to_dict(self) -> dict:
        return {
            "processed_count": self.processed,
            "skipped_count": self.skipped,
            "saved_count": self.saved,
        }
