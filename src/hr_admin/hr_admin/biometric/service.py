from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Mapping

from ..common.datetime_utils import now_local
from ..common.fields import FieldKind, FieldSpec, parse_fields
from ..core.constants import AUDIT_LOGGER_NAME, NOT_AUTHORIZED_MESSAGE
from ..core.enums import Capability
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..users.model import Actor
from .device import DeviceClientFactory
from .model import BiometricDevice, FetchResult
from .processor import in_range, process_punches
from .repository import BiometricRepository

logger = logging.getLogger(__name__)
audit = logging.getLogger(AUDIT_LOGGER_NAME)

FETCH_FIELDS = (
    FieldSpec("start_date", "Start date", FieldKind.DATE, required=False),
    FieldSpec("end_date", "End date", FieldKind.DATE, required=False),
)


class BiometricService:
    """Pulls punches from attendance terminals and stores one row per employee-day."""

    def __init__(
        self,
        devices: BiometricRepository,
        employees: EmployeeRepository,
        client_factory: DeviceClientFactory,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._devices = devices
        self._employees = employees
        self._client_factory = client_factory
        self._clock = clock

    def _device(self, actor: Actor, device_id: int) -> BiometricDevice:
        if not actor.can(Capability.MANAGE_BIOMETRICS):
            raise AuthorizationError(NOT_AUTHORIZED_MESSAGE)
        device = self._devices.get_device(int(device_id))
        if not device:
            raise NotFoundError(f"Biometric device #{device_id} not found")
        return device

    def fetch_logs(self, actor: Actor, device_id: int, form: Mapping[str, Any]) -> FetchResult:
        device = self._device(actor, device_id)

        values = parse_fields(FETCH_FIELDS, form)
        start, end = values["start_date"], values["end_date"]
        if start and end and end < start:
            raise ValidationError.for_field("end_date", "End date must be on or after the start date")

        client = self._client_factory(device)
        client.connect()
        try:
            punches = client.get_attendance()
        finally:
            client.disconnect()

        punches = [p for p in punches if in_range(p, start, end)]
        employees = self._employees.map_by_idno(p.user_id for p in punches)
        rows, processed, skipped = process_punches(punches, employees)

        saved = self._devices.upsert_attendance(rows)
        self._devices.touch_last_sync(device.device_id, self._clock())

        result = FetchResult(processed=processed, skipped=skipped, saved=saved)
        audit.info(
            "BIOMETRIC SYNC device %s (%s) by user %s: processed=%d skipped=%d saved=%d",
            device.device_id, device.name, actor.user_id, processed, skipped, saved,
        )
        return result

    def clear_device(self, actor: Actor, device_id: int) -> None:
        device = self._device(actor, device_id)

        client = self._client_factory(device)
        client.connect()
        try:
            client.clear_attendance()
        finally:
            client.disconnect()
        audit.info("BIOMETRIC CLEAR device %s (%s) by user %s", device.device_id, device.name, actor.user_id)
