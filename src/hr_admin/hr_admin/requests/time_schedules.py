from __future__ import annotations

from typing import Any, Dict, Mapping

from ..common.fields import FieldKind, FieldSpec
from ..workflow.definition import RequestTypeHandler, ResourceDefinition

SCHEDULE_TYPES = ("regular", "night", "flexible", "rotating")


class TimeScheduleHandler(RequestTypeHandler):
    def validate(self, values: Mapping[str, Any]) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        if values.get("end_date") and values["end_date"] < values["effective_date"]:
            errors["end_date"] = "End date must be on or after the effective date"
        if values["new_end_time"] == values["new_start_time"]:
            errors["new_end_time"] = "End time must be different from start time"
        return errors


TIME_SCHEDULES = ResourceDefinition(
    key="time-schedules",
    table="time_schedules",
    label="Time Schedule",
    fields=(
        FieldSpec("schedule_type", "Schedule type", FieldKind.CHOICE, choices=SCHEDULE_TYPES),
        FieldSpec("effective_date", "Effective date", FieldKind.DATE),
        FieldSpec("end_date", "End date", FieldKind.DATE, required=False),
        FieldSpec("new_start_time", "New start time", FieldKind.TIME),
        FieldSpec("new_end_time", "New end time", FieldKind.TIME),
    ),
    date_field="effective_date",
    handler=TimeScheduleHandler(),
)
