from __future__ import annotations

import logging
from typing import Callable, List, Optional, Protocol

from zk import ZK
from zk.exception import ZKError

from ..core.constants import DEFAULT_BIOMETRIC_TIMEOUT
from ..core.exceptions import DeviceConnectionError
from .model import BiometricDevice, Punch

logger = logging.getLogger(__name__)


class DeviceClient(Protocol):
    """Session with one attendance terminal."""

    def connect(self) -> None:
        raise NotImplementedError

    def get_attendance(self) -> List[Punch]:
        raise NotImplementedError

    def clear_attendance(self) -> None:
        raise NotImplementedError

    def disconnect(self) -> None:
        raise NotImplementedError


DeviceClientFactory = Callable[[BiometricDevice], DeviceClient]


class ZKDeviceClient(DeviceClient):
    """ZKTeco terminal over the vendor protocol, via pyzk."""

    def __init__(self, ip_address: str, port: int, *, timeout: int = DEFAULT_BIOMETRIC_TIMEOUT):
        self._zk = ZK(ip_address, port=int(port), timeout=int(timeout))
        self._address = f"{ip_address}:{port}"
        self._conn = None

    def _require_conn(self):
        if self._conn is None:
            raise DeviceConnectionError(f"Not connected to device {self._address}")
        return self._conn

    def connect(self) -> None:
        try:
            self._conn = self._zk.connect()
        except (ZKError, OSError) as e:
            logger.warning("Failed to connect to device %s: %s", self._address, e)
            raise DeviceConnectionError(f"Failed to connect to device {self._address}")

    def get_attendance(self) -> List[Punch]:
        conn = self._require_conn()
        try:
            conn.disable_device()
            try:
                records = conn.get_attendance() or []
            finally:
                conn.enable_device()
        except (ZKError, OSError) as e:
            logger.warning("Failed to read attendance from %s: %s", self._address, e)
            raise DeviceConnectionError(f"Failed to read attendance from device {self._address}")
        return [Punch(user_id=str(r.user_id), timestamp=r.timestamp) for r in records]

    def clear_attendance(self) -> None:
        conn = self._require_conn()
        try:
            conn.clear_attendance()
        except (ZKError, OSError) as e:
            logger.warning("Failed to clear attendance on %s: %s", self._address, e)
            raise DeviceConnectionError(f"Failed to clear attendance on device {self._address}")

    def disconnect(self) -> None:
        conn, self._conn = self._conn, None
        if conn is None:
            return
        try:
            conn.disconnect()
        except (ZKError, OSError) as e:
            logger.warning("Error while disconnecting from %s: %s", self._address, e)


def zk_client_factory(timeout: Optional[int] = None) -> DeviceClientFactory:
    def factory(device: BiometricDevice) -> DeviceClient:
        return ZKDeviceClient(device.ip_address, device.port, timeout=timeout or DEFAULT_BIOMETRIC_TIMEOUT)

    return factory
