from __future__ import annotations

from ..leave_banks.service import LeaveBankService
from ..offsets.service import OffsetBankService
from ..workflow.definition import ResourceRegistry
from .offsets import offsets_definition
from .overtimes import OVERTIMES
from .restdays import CANCEL_RESTDAYS, CHANGE_RESTDAYS
from .retros import RETROS
from .slvl import slvl_definition
from .time_schedules import TIME_SCHEDULES
from .travel_orders import TRAVEL_ORDERS


def build_registry(offset_bank: OffsetBankService, leave_bank: LeaveBankService) -> ResourceRegistry:
    """Every request type served under /<key>."""

    return ResourceRegistry(
        [
            offsets_definition(offset_bank),
            CHANGE_RESTDAYS,
            CANCEL_RESTDAYS,
            RETROS,
            OVERTIMES,
            TIME_SCHEDULES,
            TRAVEL_ORDERS,
            slvl_definition(leave_bank),
        ]
    )
