from __future__ import annotations

from typing import Any, Dict, Mapping

from ..common.fields import FieldKind, FieldSpec
from ..workflow.definition import RequestTypeHandler, ResourceDefinition


class ChangeRestdayHandler(RequestTypeHandler):
    def validate(self, values: Mapping[str, Any]) -> Dict[str, str]:
        if values["requested_date"] == values["original_date"]:
            return {"requested_date": "Requested date must be different from the original rest day"}
        return {}


class CancelRestdayHandler(RequestTypeHandler):
    def validate(self, values: Mapping[str, Any]) -> Dict[str, str]:
        if values.get("replacement_work_date") and values["replacement_work_date"] == values["rest_day_date"]:
            return {"replacement_work_date": "Replacement work date must be different from the rest day"}
        return {}


CHANGE_RESTDAYS = ResourceDefinition(
    key="change-restdays",
    table="change_restdays",
    label="Change Rest Day",
    fields=(
        FieldSpec("original_date", "Original rest day", FieldKind.DATE),
        FieldSpec("requested_date", "Requested rest day", FieldKind.DATE),
    ),
    date_field="original_date",
    duplicate_keys=("original_date", "requested_date"),
    handler=ChangeRestdayHandler(),
)

CANCEL_RESTDAYS = ResourceDefinition(
    key="cancel-restdays",
    table="cancel_restdays",
    label="Cancel Rest Day",
    fields=(
        FieldSpec("rest_day_date", "Rest day", FieldKind.DATE),
        FieldSpec("replacement_work_date", "Replacement work date", FieldKind.DATE, required=False),
    ),
    date_field="rest_day_date",
    duplicate_keys=("rest_day_date",),
    handler=CancelRestdayHandler(),
)
