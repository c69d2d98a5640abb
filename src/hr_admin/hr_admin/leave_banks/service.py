from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, List, Mapping, Optional

from ..common.datetime_utils import now_local
from ..common.fields import FieldKind, FieldSpec, parse_fields
from ..core.constants import (
    AUDIT_LOGGER_NAME,
    BANKED_LEAVE_TYPES,
    DEFAULT_LEAVE_BANK_DAYS,
    LEAVE_BANK_YEARS_AHEAD,
    LEAVE_BANK_YEARS_BACK,
    MAX_REMARKS_LENGTH,
    NOT_AUTHORIZED_MESSAGE,
)
from ..core.enums import Capability
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..users.model import Actor
from .model import LeaveBank
from .repository import LeaveBankRepository

logger = logging.getLogger(__name__)
audit = logging.getLogger(AUDIT_LOGGER_NAME)

ADD_DAYS_FIELDS = (
    FieldSpec("employee_id", "Employee", FieldKind.INTEGER, min_value=Decimal("1")),
    FieldSpec("leave_type", "Leave type", FieldKind.CHOICE, choices=BANKED_LEAVE_TYPES),
    FieldSpec("days", "Days", FieldKind.DECIMAL, min_value=Decimal("0.5"), max_value=Decimal("365")),
    FieldSpec("year", "Year", FieldKind.INTEGER, required=False),
    FieldSpec("notes", "Notes", FieldKind.TEXT, required=False, max_length=MAX_REMARKS_LENGTH),
)

YEAR_FIELD = FieldSpec("year", "Year", FieldKind.INTEGER, required=False)


class LeaveBankService:
    """Paid sick and vacation days per employee and year.

    A bank that does not exist yet is opened with the default allowance the
    first time a paid leave is checked against it.
    """

    def __init__(
        self,
        banks: LeaveBankRepository,
        employees: EmployeeRepository,
        *,
        clock: Callable[[], datetime] = now_local,
        default_days: int = DEFAULT_LEAVE_BANK_DAYS,
    ):
        self._banks = banks
        self._employees = employees
        self._clock = clock
        self._default_days = Decimal(default_days)

    @staticmethod
    def draws_on_bank(leave_type: Optional[str], with_pay: bool) -> bool:
        return bool(with_pay) and leave_type in BANKED_LEAVE_TYPES

    def year_error(self, year: int) -> Optional[str]:
        current = self._clock().year
        low, high = current - LEAVE_BANK_YEARS_BACK, current + LEAVE_BANK_YEARS_AHEAD
        if not low <= int(year) <= high:
            return f"Bank year must be between {low} and {high}"
        return None

    def _employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError(f"Employee #{employee_id} not found")
        return employee

    def balance(self, employee_id: int, leave_type: str, year: int) -> LeaveBank:
        return self._banks.get(int(employee_id), leave_type, int(year)) or LeaveBank(
            employee_id=int(employee_id), leave_type=leave_type, year=int(year)
        )

    def _open(self, employee_id: int, leave_type: str, year: int) -> LeaveBank:
        self._banks.open(
            employee_id,
            leave_type,
            year,
            self._default_days,
            notes=f"Auto-created default bank for year {year}",
            now=self._clock(),
        )
        return self.balance(employee_id, leave_type, year)

    def get_bank(self, actor: Actor, employee_id: int, year: Any = None) -> List[LeaveBank]:
        employee = self._employee(employee_id)
        allowed = (
            actor.can(Capability.VIEW_ALL)
            or actor.employee_id == employee.employee_id
            or actor.manages(employee.department)
        )
        if not allowed:
            raise AuthorizationError(NOT_AUTHORIZED_MESSAGE)

        year = parse_fields((YEAR_FIELD,), {"year": year})["year"] or self._clock().year
        return [self.balance(employee.employee_id, leave_type, year) for leave_type in BANKED_LEAVE_TYPES]

    def add_days(self, actor: Actor, form: Mapping[str, Any]) -> LeaveBank:
        if not actor.can(Capability.MANAGE_LEAVE_BANK):
            raise AuthorizationError(NOT_AUTHORIZED_MESSAGE)

        values = parse_fields(ADD_DAYS_FIELDS, form)
        year = values["year"] or self._clock().year
        error = self.year_error(year)
        if error:
            raise ValidationError.for_field("year", error)
        employee = self._employee(values["employee_id"])

        now = self._clock()
        note = f"{now:%Y-%m-%d %H:%M} - Added {values['days']} days by {actor.name}"
        if values["notes"]:
            note = f"{note}: {values['notes']}"
        self._banks.add_days(employee.employee_id, values["leave_type"], year, values["days"], notes=note, now=now)
        audit.info(
            "LEAVE BANK +%s %s day(s) for employee %s, year %s, by user %s",
            values["days"], values["leave_type"], employee.employee_id, year, actor.user_id,
        )
        return self.balance(employee.employee_id, values["leave_type"], year)

    def ensure_available(self, employee_id: int, leave_type: str, year: int, days: Decimal) -> None:
        bank = self._open(employee_id, leave_type, year)
        if bank.remaining_days < Decimal(days):
            raise ValidationError.for_field(
                "leave_type",
                f"Insufficient {leave_type} leave days for year {year}. Employee has "
                f"{bank.remaining_days} days available out of {bank.total_days} total days.",
            )

    def deduct(self, *, employee_id: int, leave_type: str, year: int, days: Decimal, leave_id: int) -> None:
        """Use the days of an approved paid leave."""

        self._open(employee_id, leave_type, year)
        now = self._clock()
        note = f"{now:%Y-%m-%d %H:%M} - Used {days} days for leave ID {leave_id}"
        if not self._banks.use_days(employee_id, leave_type, year, Decimal(days), notes=note, now=now):
            bank = self.balance(employee_id, leave_type, year)
            raise ValidationError(
                f"Leave #{leave_id}: Insufficient days in {leave_type} leave bank for year {year}. "
                f"Employee has {bank.remaining_days} days available."
            )
        audit.info("LEAVE BANK -%s %s day(s) for employee %s, year %s (leave #%s)", days, leave_type, employee_id, year, leave_id)
