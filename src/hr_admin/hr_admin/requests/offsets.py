from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Mapping

from ..common.fields import FieldKind, FieldSpec
from ..core.enums import TransactionType
from ..employees.model import Employee
from ..offsets.service import OffsetBankService
from ..workflow.definition import RequestTypeHandler, ResourceDefinition
from ..workflow.model import RequestRecord

FIELDS = (
    FieldSpec("offset_type", "Offset type", FieldKind.TEXT, max_length=60),
    FieldSpec("date", "Offset date", FieldKind.DATE),
    FieldSpec("workday", "Workday", FieldKind.DATE),
    FieldSpec("hours", "Hours", FieldKind.DECIMAL, min_value=Decimal("0.5"), max_value=Decimal("24")),
    FieldSpec(
        "transaction_type",
        "Transaction type",
        FieldKind.CHOICE,
        choices=tuple(t.value for t in TransactionType),
    ),
)


class OffsetHandler(RequestTypeHandler):
    """Credits and debits are posted to the offset bank when approved."""

    def __init__(self, bank: OffsetBankService):
        self._bank = bank

    def validate(self, values: Mapping[str, Any]) -> Dict[str, str]:
        if values["workday"] == values["date"]:
            return {"workday": "Workday must be different from the offset date"}
        return {}

    def before_submit(self, employee: Employee, values: Mapping[str, Any]) -> None:
        if values["transaction_type"] == TransactionType.DEBIT.value:
            self._bank.ensure_available(employee.employee_id, values["hours"])

    def before_approve(self, record: RequestRecord) -> None:
        if record.details["transaction_type"] == TransactionType.DEBIT.value:
            self._bank.ensure_available(record.employee_id, record.details["hours"])

    def after_approve(self, record: RequestRecord) -> None:
        self._bank.post(
            employee_id=record.employee_id,
            hours=record.details["hours"],
            transaction_type=TransactionType(record.details["transaction_type"]),
            offset_id=record.request_id,
        )


def offsets_definition(bank: OffsetBankService) -> ResourceDefinition:
    return ResourceDefinition(
        key="offsets",
        table="offsets",
        label="Offset",
        fields=FIELDS,
        date_field="date",
        handler=OffsetHandler(bank),
    )
