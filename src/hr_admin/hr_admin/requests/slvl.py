from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Mapping

from ..common.datetime_utils import inclusive_days
from ..common.fields import FieldKind, FieldSpec
from ..employees.model import Employee
from ..leave_banks.service import LeaveBankService
from ..workflow.definition import RequestTypeHandler, ResourceDefinition
from ..workflow.model import RequestRecord

LEAVE_TYPES = ("sick", "vacation", "emergency", "bereavement", "maternity", "paternity", "personal", "study")

FIELDS = (
    FieldSpec("leave_type", "Leave type", FieldKind.CHOICE, choices=LEAVE_TYPES),
    FieldSpec("start_date", "Start date", FieldKind.DATE),
    FieldSpec("end_date", "End date", FieldKind.DATE),
    FieldSpec("half_day", "Half day", FieldKind.BOOLEAN, required=False),
    FieldSpec("am_pm", "AM/PM", FieldKind.CHOICE, required=False, choices=("am", "pm")),
    FieldSpec("with_pay", "With pay", FieldKind.BOOLEAN, required=False),
    FieldSpec("bank_year", "Bank year", FieldKind.INTEGER, required=False),
)


def _bank_year(values: Mapping[str, Any]) -> int:
    return values.get("bank_year") or values["start_date"].year


class LeaveHandler(RequestTypeHandler):
    """Half-day leave is a single day, morning or afternoon, counted as 0.5.

    Paid sick and vacation leave is checked against the employee's bank for
    the bank year when submitted and approved, and the days are used on
    approval.
    """

    derived_fields = (FieldSpec("total_days", "Total days", FieldKind.DECIMAL),)

    def __init__(self, bank: LeaveBankService):
        self._bank = bank

    def validate(self, values: Mapping[str, Any]) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        if values["end_date"] < values["start_date"]:
            errors["end_date"] = "End date must be on or after the start date"
        if values["half_day"]:
            if values["end_date"] != values["start_date"]:
                errors["half_day"] = "Half-day leave must start and end on the same day"
            if not values.get("am_pm"):
                errors["am_pm"] = "Choose AM or PM for a half-day leave"
        if values.get("bank_year") is not None:
            year_error = self._bank.year_error(values["bank_year"])
            if year_error:
                errors["bank_year"] = year_error
        return errors

    def derive(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        derived: Dict[str, Any] = {"bank_year": _bank_year(values)}
        if values["half_day"]:
            derived["total_days"] = Decimal("0.5")
        else:
            # am_pm only means something for half days.
            derived["total_days"] = Decimal(inclusive_days(values["start_date"], values["end_date"]))
            derived["am_pm"] = None
        return derived

    def before_submit(self, employee: Employee, values: Mapping[str, Any]) -> None:
        if self._bank.draws_on_bank(values["leave_type"], values["with_pay"]):
            derived = self.derive(values)
            self._bank.ensure_available(
                employee.employee_id, values["leave_type"], derived["bank_year"], derived["total_days"]
            )

    def before_approve(self, record: RequestRecord) -> None:
        details = record.details
        if self._bank.draws_on_bank(details["leave_type"], details["with_pay"]):
            self._bank.ensure_available(
                record.employee_id, details["leave_type"], _bank_year(details), details["total_days"]
            )

    def after_approve(self, record: RequestRecord) -> None:
        details = record.details
        if self._bank.draws_on_bank(details["leave_type"], details["with_pay"]):
            self._bank.deduct(
                employee_id=record.employee_id,
                leave_type=details["leave_type"],
                year=_bank_year(details),
                days=details["total_days"],
                leave_id=record.request_id,
            )


def slvl_definition(bank: LeaveBankService) -> ResourceDefinition:
    return ResourceDefinition(
        key="slvl",
        table="slvl",
        label="Leave",
        fields=FIELDS,
        date_field="start_date",
        handler=LeaveHandler(bank),
    )
