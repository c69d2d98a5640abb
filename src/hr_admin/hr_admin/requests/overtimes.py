from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Mapping

from ..common.datetime_utils import hours_between
from ..common.fields import FieldKind, FieldSpec
from ..workflow.definition import RequestTypeHandler, ResourceDefinition

OVERTIME_TYPES = (
    "regular_weekday",
    "rest_day",
    "scheduled_rest_day",
    "regular_holiday",
    "special_holiday",
    "emergency_work",
    "extended_shift",
    "weekend_work",
    "night_shift",
    "other",
)


class OvertimeHandler(RequestTypeHandler):
    derived_fields = (FieldSpec("total_hours", "Total hours", FieldKind.DECIMAL),)

    def validate(self, values: Mapping[str, Any]) -> Dict[str, str]:
        if values["end_time"] == values["start_time"]:
            return {"end_time": "End time must be different from start time"}
        return {}

    def derive(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        # An end time before the start time means the overtime runs past midnight.
        hours = hours_between(values["start_time"], values["end_time"])
        return {"total_hours": Decimal(str(hours))}


OVERTIMES = ResourceDefinition(
    key="overtimes",
    table="overtimes",
    label="Overtime",
    fields=(
        FieldSpec("date", "Overtime date", FieldKind.DATE),
        FieldSpec("start_time", "Start time", FieldKind.TIME),
        FieldSpec("end_time", "End time", FieldKind.TIME),
        FieldSpec("overtime_type", "Overtime type", FieldKind.CHOICE, choices=OVERTIME_TYPES),
        FieldSpec(
            "rate_multiplier", "Rate multiplier", FieldKind.DECIMAL, min_value=Decimal("1"), max_value=Decimal("10")
        ),
    ),
    date_field="date",
    handler=OvertimeHandler(),
)
