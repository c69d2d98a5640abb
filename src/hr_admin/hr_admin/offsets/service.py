from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional

from ..common.datetime_utils import now_local
from ..common.fields import FieldKind, FieldSpec, parse_fields
from ..core.constants import AUDIT_LOGGER_NAME, MAX_REMARKS_LENGTH, NOT_AUTHORIZED_MESSAGE
from ..core.enums import Capability, TransactionType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..users.model import Actor
from .model import OffsetBank
from .repository import OffsetBankRepository

logger = logging.getLogger(__name__)
audit = logging.getLogger(AUDIT_LOGGER_NAME)

ADD_HOURS_FIELDS = (
    FieldSpec("employee_id", "Employee", FieldKind.INTEGER, min_value=Decimal("1")),
    FieldSpec("hours", "Hours", FieldKind.DECIMAL, min_value=Decimal("0.5"), max_value=Decimal("100")),
    FieldSpec("notes", "Notes", FieldKind.TEXT, required=False, max_length=MAX_REMARKS_LENGTH),
)


class OffsetBankService:
    """Offset hours balance per employee: credits from approved offsets, debits when hours are used."""

    def __init__(
        self,
        banks: OffsetBankRepository,
        employees: EmployeeRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._banks = banks
        self._employees = employees
        self._clock = clock

    def _employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError(f"Employee #{employee_id} not found")
        return employee

    def balance(self, employee_id: int) -> OffsetBank:
        return self._banks.get(int(employee_id)) or OffsetBank(employee_id=int(employee_id))

    def get_bank(self, actor: Actor, employee_id: int) -> OffsetBank:
        employee = self._employee(employee_id)
        allowed = (
            actor.can(Capability.VIEW_ALL)
            or actor.employee_id == employee.employee_id
            or actor.manages(employee.department)
        )
        if not allowed:
            raise AuthorizationError(NOT_AUTHORIZED_MESSAGE)
        return self.balance(employee.employee_id)

    def add_hours(self, actor: Actor, form: Mapping[str, Any]) -> OffsetBank:
        if not actor.can(Capability.MANAGE_OFFSET_BANK):
            raise AuthorizationError(NOT_AUTHORIZED_MESSAGE)

        values = parse_fields(ADD_HOURS_FIELDS, form)
        employee = self._employee(values["employee_id"])
        notes = values["notes"] or f"Manual addition by {actor.name}"

        self._banks.credit(employee.employee_id, values["hours"], notes=notes, now=self._clock())
        audit.info("OFFSET BANK +%s h for employee %s by user %s", values["hours"], employee.employee_id, actor.user_id)
        return self.balance(employee.employee_id)

    def ensure_available(self, employee_id: int, hours: Decimal) -> None:
        remaining = self.balance(employee_id).remaining_hours
        if Decimal(hours) > remaining:
            raise ValidationError.for_field(
                "hours",
                f"Insufficient hours in offset bank. Employee only has {remaining} hours available.",
            )

    def post(
        self,
        *,
        employee_id: int,
        hours: Decimal,
        transaction_type: TransactionType,
        offset_id: Optional[int] = None,
    ) -> None:
        """Apply an approved offset to the bank."""

        now = self._clock()
        if transaction_type == TransactionType.CREDIT:
            self._banks.credit(employee_id, hours, notes=f"Credit from offset ID {offset_id}", now=now, offset_id=offset_id)
        else:
            ok = self._banks.debit(employee_id, hours, notes=f"Debit from offset ID {offset_id}", now=now, offset_id=offset_id)
            if not ok:
                remaining = self.balance(employee_id).remaining_hours
                raise ValidationError(
                    f"Offset #{offset_id}: Insufficient hours in offset bank. "
                    f"Employee only has {remaining} hours available."
                )
        audit.info("OFFSET BANK %s %s h for employee %s (offset #%s)", transaction_type.value, hours, employee_id, offset_id)
