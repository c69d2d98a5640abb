from __future__ import annotations

from decimal import Decimal

import pytest
from werkzeug.security import generate_password_hash

from src.hr_admin.hr_admin.biometric.model import BiometricDevice, Punch
from src.hr_admin.hr_admin.biometric.service import BiometricService
from src.hr_admin.hr_admin.container import Container
from src.hr_admin.hr_admin.core.enums import Role
from src.hr_admin.hr_admin.leave_banks.service import LeaveBankService
from src.hr_admin.hr_admin.main import create_app
from src.hr_admin.hr_admin.offsets.model import OffsetBank
from src.hr_admin.hr_admin.offsets.service import OffsetBankService
from src.hr_admin.hr_admin.requests.registry import build_registry
from src.hr_admin.hr_admin.users.model import User
from src.hr_admin.hr_admin.users.service import AuthService
from src.hr_admin.hr_admin.workflow.export import XLSX_MIMETYPE
from src.hr_admin.hr_admin.workflow.service import ApprovalService
from tests.fakes import (
    FakeDeviceClient,
    InMemoryBiometric,
    InMemoryEmployees,
    InMemoryLeaveBanks,
    InMemoryOffsetBanks,
    InMemoryRequests,
    InMemoryUsers,
    fixed_clock,
)

USERS = [
    User(1, "Super Admin", "admin", generate_password_hash("admin123"), employee_id=1),
    User(2, "Hannah Reyes", "hreyes", generate_password_hash("secret"), employee_id=2),
    User(3, "Miguel Santos", "msantos", generate_password_hash("secret"), employee_id=3),
    User(4, "Ana Cruz", "acruz", generate_password_hash("secret"), employee_id=4),
    User(5, "Leo Garcia", "lgarcia", generate_password_hash("secret"), employee_id=5),
]


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setenv("AUTO_INIT_DB", "0")
    monkeypatch.setenv("AUTO_SEED_DB", "0")

    employees = InMemoryEmployees()
    requests = InMemoryRequests(employees)
    banks = InMemoryOffsetBanks()
    device_client = FakeDeviceClient([Punch("1004", fixed_clock()), Punch("1004", fixed_clock().replace(hour=18))])

    bank_service = OffsetBankService(banks, employees, clock=fixed_clock)
    leave_service = LeaveBankService(InMemoryLeaveBanks(), employees, clock=fixed_clock)
    container = Container(
        auth_service=AuthService(
            InMemoryUsers(
                USERS,
                roles={1: [Role.SUPERADMIN], 2: [Role.HRD_MANAGER]},
                departments={3: ["Production"]},
            )
        ),
        approval_service=ApprovalService(requests, employees, build_registry(bank_service, leave_service), clock=fixed_clock),
        offset_bank_service=bank_service,
        leave_bank_service=leave_service,
        biometric_service=BiometricService(
            InMemoryBiometric([BiometricDevice(1, "Main Gate", "10.0.0.5", 4370)]),
            employees,
            lambda device: device_client,
            clock=fixed_clock,
        ),
    )
    app = create_app(container)
    return app, container, banks, device_client


@pytest.fixture
def client(env):
    return env[0].test_client()


def login(client, username, password="secret"):
    resp = client.post("/login", json={"username": username, "password": password})
    assert resp.status_code == 200
    return resp


OVERTIME = {
    "reason": "Month-end inventory",
    "date": "2026-03-01",
    "start_time": "18:00",
    "end_time": "20:00",
    "overtime_type": "regular_weekday",
    "rate_multiplier": "1.25",
}


def test_login_and_me(client):
    assert client.get("/me").status_code == 401

    resp = login(client, "admin", "admin123")
    assert resp.get_json()["user"]["roles"] == ["employee", "superadmin"]

    assert client.get("/me").get_json()["user"]["user_id"] == 1

    client.post("/logout")
    assert client.get("/me").status_code == 401


def test_bad_login(client):
    resp = client.post("/login", json={"username": "admin", "password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "Invalid username or password"


def test_routes_require_login(client):
    assert client.get("/overtimes").status_code == 401
    assert client.post("/overtimes", json=OVERTIME).status_code == 401


def test_submit_and_list(client):
    login(client, "acruz")

    resp = client.post("/overtimes", json=OVERTIME)
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["data"]["status"] == "pending"
    assert body["data"]["total_hours"] == 2.0

    listing = client.get("/overtimes").get_json()
    assert listing["count"] == 1
    assert listing["data"][0]["employee_name"] == "Cruz, Ana"


def test_form_posts_are_accepted(client):
    login(client, "acruz")
    resp = client.post("/overtimes", data=OVERTIME)
    assert resp.status_code == 201


def test_validation_errors_are_422(client):
    login(client, "acruz")

    resp = client.post("/overtimes", json={**OVERTIME, "start_time": "late"})

    assert resp.status_code == 422
    assert "start_time" in resp.get_json()["errors"]


def test_bad_list_filters_are_422(client):
    login(client, "hreyes")
    resp = client.get("/overtimes?from_date=2026-03-05&to_date=2026-03-01")
    assert resp.status_code == 422


def test_unknown_request_is_404(client):
    login(client, "hreyes")
    assert client.get("/overtimes/999").status_code == 404
    assert client.get("/bonuses").status_code == 404


def test_status_update_and_forbidden_actor(client):
    login(client, "acruz")
    rid = client.post("/overtimes", json=OVERTIME).get_json()["data"]["id"]

    login(client, "lgarcia")
    resp = client.post(f"/overtimes/{rid}/status", json={"status": "approved"})
    assert resp.status_code == 403
    assert resp.get_json() == {"error": "You are not authorized to perform this action."}

    login(client, "msantos")
    resp = client.post(f"/overtimes/{rid}/status", json={"status": "approved", "remarks": "ok"})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "approved"

    resp = client.post(f"/overtimes/{rid}/status", json={"status": "rejected", "remarks": "late"})
    assert resp.status_code == 422


def test_bulk_update_partial_success(client):
    login(client, "acruz")
    ids = [client.post("/overtimes", json={**OVERTIME, "date": f"2026-03-0{d}"}).get_json()["data"]["id"] for d in (1, 2)]
    login(client, "lgarcia")
    leo_id = client.post("/overtimes", json=OVERTIME).get_json()["data"]["id"]

    login(client, "msantos")
    resp = client.post("/overtimes/bulk-update", json={"ids": ids + [leo_id], "status": "approved"})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success_count"] == 2
    assert body["failure_count"] == 1
    assert body["failures"][0]["id"] == leo_id
    assert body["message"] == "2 request(s) updated successfully. 1 failed."


def test_bulk_update_with_form_ids(client):
    login(client, "acruz")
    rid = client.post("/overtimes", json=OVERTIME).get_json()["data"]["id"]

    login(client, "hreyes")
    resp = client.post("/overtimes/bulk-update", data={"ids[]": [str(rid)], "status": "rejected", "remarks": "No budget"})

    assert resp.get_json()["updated_ids"] == [rid]


def test_force_approve_only_for_superadmin(client):
    login(client, "acruz")
    rid = client.post("/overtimes", json=OVERTIME).get_json()["data"]["id"]

    login(client, "hreyes")
    assert client.post("/overtimes/force-approve", json={"ids": [rid]}).status_code == 403

    login(client, "admin", "admin123")
    resp = client.post("/overtimes/force-approve", json={"ids": [rid], "remarks": "Cutoff"})
    assert resp.status_code == 200
    assert resp.get_json()["updated_ids"] == [rid]

    record = client.get(f"/overtimes/{rid}").get_json()["data"]
    assert record["status"] == "force_approved"
    assert record["remarks"] == "Administrative override: Cutoff"


def test_delete_pending_only(client):
    login(client, "acruz")
    rid = client.post("/overtimes", json=OVERTIME).get_json()["data"]["id"]
    assert client.delete(f"/overtimes/{rid}").status_code == 200
    assert client.get(f"/overtimes/{rid}").status_code == 404


def test_export_sends_workbook(client):
    login(client, "hreyes")
    client.post("/overtimes", json={**OVERTIME, "employee_id": 4})

    resp = client.get("/overtimes/export")

    assert resp.status_code == 200
    assert resp.mimetype == XLSX_MIMETYPE
    assert "overtimes_20260302_093000.xlsx" in resp.headers["Content-Disposition"]
    assert resp.data[:2] == b"PK"


def test_offset_bank_endpoints(env, client):
    _, _, banks, _ = env
    banks.banks[4] = OffsetBank(employee_id=4, total_hours=Decimal("8"), remaining_hours=Decimal("8"))

    login(client, "acruz")
    assert client.get("/offsets/bank/4").get_json()["offset_bank"]["remaining_hours"] == 8.0
    assert client.get("/offsets/bank/5").status_code == 403
    assert client.post("/offsets/bank", json={"employee_id": 4, "hours": 4}).status_code == 403

    login(client, "hreyes")
    resp = client.post("/offsets/bank", json={"employee_id": 4, "hours": 4, "notes": "Saturday shift"})
    assert resp.status_code == 200
    assert resp.get_json()["offset_bank"]["remaining_hours"] == 12.0


def test_biometric_fetch_logs(env, client):
    device_client = env[3]

    login(client, "acruz")
    assert client.post("/biometric/devices/1/fetch-logs", json={}).status_code == 403

    login(client, "hreyes")
    resp = client.post("/biometric/devices/1/fetch-logs", json={})
    assert resp.status_code == 200
    assert resp.get_json()["log_summary"] == {"processed_count": 2, "skipped_count": 0, "saved_count": 1}

    device_client.reachable = False
    resp = client.post("/biometric/devices/1/fetch-logs", json={})
    assert resp.status_code == 502


@pytest.mark.parametrize("ids", ["12", 5, "1,2"])
def test_bulk_update_refuses_ids_that_are_not_a_list(client, ids):
    login(client, "acruz")
    for d in (1, 2):
        client.post("/overtimes", json={**OVERTIME, "date": f"2026-03-0{d}"})

    login(client, "hreyes")
    resp = client.post("/overtimes/bulk-update", json={"ids": ids, "status": "approved"})

    assert resp.status_code == 422
    assert "ids" in resp.get_json()["errors"]
    statuses = {r["status"] for r in client.get("/overtimes").get_json()["data"]}
    assert statuses == {"pending"}


def test_leave_bank_endpoints(client):
    login(client, "acruz")
    banks = client.get("/slvl/bank/4?year=2026").get_json()["leave_banks"]
    assert [b["leave_type"] for b in banks] == ["sick", "vacation"]
    assert client.get("/slvl/bank/5").status_code == 403
    assert client.post("/slvl/bank", json={"employee_id": 4, "leave_type": "sick", "days": 3}).status_code == 403

    login(client, "hreyes")
    resp = client.post("/slvl/bank", json={"employee_id": 4, "leave_type": "sick", "days": 3, "year": 2026})
    assert resp.status_code == 200
    assert resp.get_json()["leave_bank"]["remaining_days"] == 3.0

    resp = client.post("/slvl/bank", json={"employee_id": 4, "leave_type": "study", "days": 3})
    assert resp.status_code == 422
