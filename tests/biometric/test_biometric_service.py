from __future__ import annotations

from datetime import date, datetime

import pytest

from src.hr_admin.hr_admin.biometric.model import BiometricDevice, Punch
from src.hr_admin.hr_admin.biometric.service import BiometricService
from src.hr_admin.hr_admin.core.exceptions import (
    AuthorizationError,
    DeviceConnectionError,
    NotFoundError,
    ValidationError,
)
from tests.fakes import (
    NOW,
    FakeDeviceClient,
    InMemoryBiometric,
    InMemoryEmployees,
    fixed_clock,
    hrd,
    production_manager,
)

DEVICE = BiometricDevice(device_id=1, name="Main Gate", ip_address="10.0.0.5", port=4370, location="Lobby")

PUNCHES = [
    Punch("1004", datetime(2026, 3, 2, 8, 0)),
    Punch("1004", datetime(2026, 3, 2, 17, 0)),
    Punch("1005", datetime(2026, 3, 2, 9, 0)),
    Punch("1005", datetime(2026, 3, 3, 9, 5)),
    Punch("4242", datetime(2026, 3, 2, 8, 30)),
]


def make_service(client: FakeDeviceClient):
    store = InMemoryBiometric([DEVICE])
    created = []

    def factory(device):
        created.append(device)
        return client

    service = BiometricService(store, InMemoryEmployees(), factory, clock=fixed_clock)
    return service, store, created


def test_fetch_logs_processes_and_saves():
    client = FakeDeviceClient(PUNCHES)
    service, store, created = make_service(client)

    result = service.fetch_logs(hrd(), 1, {})

    assert result.to_dict() == {"processed_count": 4, "skipped_count": 1, "saved_count": 3}
    assert created == [DEVICE]
    assert client.disconnects == 1
    assert store.synced == {1: NOW}
    assert store.rows[(4, date(2026, 3, 2))].time_out == datetime(2026, 3, 2, 17, 0)


def test_fetch_logs_date_range():
    client = FakeDeviceClient(PUNCHES)
    service, store, _ = make_service(client)

    result = service.fetch_logs(hrd(), 1, {"start_date": "2026-03-03", "end_date": "2026-03-03"})

    assert result.processed == 1
    assert result.skipped == 0
    assert list(store.rows) == [(5, date(2026, 3, 3))]


def test_fetch_logs_rejects_inverted_range():
    service, _, created = make_service(FakeDeviceClient(PUNCHES))

    with pytest.raises(ValidationError) as exc:
        service.fetch_logs(hrd(), 1, {"start_date": "2026-03-05", "end_date": "2026-03-01"})

    assert "end_date" in exc.value.errors
    assert created == []


def test_unreachable_device():
    client = FakeDeviceClient(PUNCHES, reachable=False)
    service, store, _ = make_service(client)

    with pytest.raises(DeviceConnectionError):
        service.fetch_logs(hrd(), 1, {})

    assert store.rows == {}
    assert store.synced == {}


def test_device_access_and_lookup():
    service, _, _ = make_service(FakeDeviceClient())

    with pytest.raises(AuthorizationError):
        service.fetch_logs(production_manager(), 1, {})
    with pytest.raises(NotFoundError):
        service.fetch_logs(hrd(), 2, {})


def test_clear_device():
    client = FakeDeviceClient(PUNCHES)
    service, _, _ = make_service(client)

    service.clear_device(hrd(), 1)

    assert client.cleared is True
    assert client.punches == []
    assert client.disconnects == 1
