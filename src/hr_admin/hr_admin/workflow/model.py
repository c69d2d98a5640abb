from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from ..core.enums import RequestStatus


def _jsonable(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, Decimal):
        return float(value)
    return value


@dataclass(frozen=True)
class RequestRecord:
    """One request of any type. Type-specific columns live in `details`."""

    request_id: int
    resource: str
    employee_id: int
    employee_name: str
    department: Optional[str]
    status: RequestStatus
    reason: str
    details: Mapping[str, Any]
    created_at: datetime
    remarks: Optional[str] = None
    created_by: Optional[int] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.request_id,
            "resource": self.resource,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "department": self.department,
            "status": self.status.value,
            "reason": self.reason,
            "remarks": self.remarks,
            "created_by": self.created_by,
            "approved_by": self.approved_by,
            "approved_at": _jsonable(self.approved_at),
            "created_at": _jsonable(self.created_at),
        }
        data.update({k: _jsonable(v) for k, v in self.details.items()})
        return data


@dataclass(frozen=True)
class RequestFilter:
    status: Optional[RequestStatus] = None
    search: Optional[str] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None


@dataclass(frozen=True)
class RequestScope:
    """Rows an actor may see: everything, or own records plus managed departments."""

    unrestricted: bool = False
    employee_id: Optional[int] = None
    departments: FrozenSet[str] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not self.unrestricted and self.employee_id is None and not self.departments


@dataclass(frozen=True)
class BulkFailure:
    request_id: int
    message: str


@dataclass
class BulkResult:
    """Outcome of one decision applied to many records."""

    updated_ids: List[int] = field(default_factory=list)
    failures: List[BulkFailure] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.updated_ids)

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    def summary(self, verb: str = "updated") -> str:
        message = f"{self.success_count} request(s) {verb} successfully."
        if self.failures:
            message += f" {self.failure_count} failed."
        return message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success_count": self.success_count,
            "failure_count": self.failure_count,
            "updated_ids": list(self.updated_ids),
            "failures": [{"id": f.request_id, "message": f.message} for f in self.failures],
        }
