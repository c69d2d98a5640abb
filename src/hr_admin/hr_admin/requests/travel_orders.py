from __future__ import annotations

from typing import Any, Dict, Mapping

from ..common.datetime_utils import inclusive_days
from ..common.fields import FieldKind, FieldSpec
from ..workflow.definition import RequestTypeHandler, ResourceDefinition


class TravelOrderHandler(RequestTypeHandler):
    derived_fields = (FieldSpec("total_days", "Total days", FieldKind.INTEGER),)

    def validate(self, values: Mapping[str, Any]) -> Dict[str, str]:
        if values["end_date"] < values["start_date"]:
            return {"end_date": "End date must be on or after the start date"}
        return {}

    def derive(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        return {"total_days": inclusive_days(values["start_date"], values["end_date"])}


TRAVEL_ORDERS = ResourceDefinition(
    key="travel-orders",
    table="travel_orders",
    label="Travel Order",
    fields=(
        FieldSpec("start_date", "Start date", FieldKind.DATE),
        FieldSpec("end_date", "End date", FieldKind.DATE),
        FieldSpec("destination", "Destination", FieldKind.TEXT, max_length=255),
        FieldSpec("transportation_type", "Transportation", FieldKind.TEXT, max_length=40),
        FieldSpec("purpose", "Purpose", FieldKind.TEXT, max_length=1000),
    ),
    date_field="start_date",
    handler=TravelOrderHandler(),
)
