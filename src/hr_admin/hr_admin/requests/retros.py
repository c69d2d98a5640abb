from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Mapping

from ..common.fields import FieldKind, FieldSpec
from ..workflow.definition import RequestTypeHandler, ResourceDefinition

RETRO_TYPES = ("days", "overtime", "slvl", "holiday", "rd_ot")
ADJUSTMENT_TYPES = ("increase", "decrease", "correction", "backdated")


def compute_retro_amount(hours_days: Decimal, multiplier_rate: Decimal, base_rate: Decimal) -> Decimal:
    return (Decimal(hours_days) * Decimal(multiplier_rate) * Decimal(base_rate)).quantize(
        Decimal("0.01"), rounding=ROUND_HALF_UP
    )


class RetroHandler(RequestTypeHandler):
    """The amount is always computed here; a submitted amount is ignored."""

    derived_fields = (FieldSpec("computed_amount", "Computed amount", FieldKind.DECIMAL),)

    def derive(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        return {
            "computed_amount": compute_retro_amount(
                values["hours_days"], values["multiplier_rate"], values["base_rate"]
            )
        }


RETROS = ResourceDefinition(
    key="retros",
    table="retros",
    label="Retro",
    fields=(
        FieldSpec("retro_type", "Retro type", FieldKind.CHOICE, choices=RETRO_TYPES),
        FieldSpec("retro_date", "Retro date", FieldKind.DATE),
        FieldSpec("adjustment_type", "Adjustment type", FieldKind.CHOICE, choices=ADJUSTMENT_TYPES),
        FieldSpec("hours_days", "Hours/Days", FieldKind.DECIMAL, min_value=Decimal("0.01")),
        FieldSpec(
            "multiplier_rate", "Multiplier rate", FieldKind.DECIMAL, min_value=Decimal("0.1"), max_value=Decimal("10")
        ),
        FieldSpec("base_rate", "Base rate", FieldKind.DECIMAL, min_value=Decimal("0.01")),
    ),
    date_field="retro_date",
    duplicate_keys=("retro_type", "retro_date"),
    handler=RetroHandler(),
)
