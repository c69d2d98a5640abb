from __future__ import annotations

from datetime import datetime

import pytest

from src.hr_admin.hr_admin.core.enums import RequestStatus
from src.hr_admin.hr_admin.core.exceptions import AuthorizationError, ValidationError
from src.hr_admin.hr_admin.workflow.guard import StatusTransitionGuard, parse_target_status
from src.hr_admin.hr_admin.workflow.model import RequestRecord
from tests.fakes import NOW, employee_ana, hrd, production_manager, superadmin


def _record(status=RequestStatus.PENDING, department="Production", employee_id=4) -> RequestRecord:
    return RequestRecord(
        request_id=7,
        resource="overtimes",
        employee_id=employee_id,
        employee_name="Cruz, Ana",
        department=department,
        status=status,
        reason="Inventory count",
        details={},
        created_at=datetime(2026, 3, 1, 8, 0, 0),
    )


@pytest.mark.parametrize("value", ["approved", " Rejected ", RequestStatus.FORCE_APPROVED])
def test_parse_target_status_accepts_decisions(value):
    assert parse_target_status(value) in {
        RequestStatus.APPROVED,
        RequestStatus.REJECTED,
        RequestStatus.FORCE_APPROVED,
    }


@pytest.mark.parametrize("value", ["pending", "cancelled", "", None, 3])
def test_parse_target_status_rejects_everything_else(value):
    with pytest.raises(ValidationError) as exc:
        parse_target_status(value)
    assert "status" in exc.value.errors


def test_hrd_can_approve_any_department():
    decided = StatusTransitionGuard().transition(
        actor=hrd(), record=_record(department="Warehouse"), target=RequestStatus.APPROVED, remarks=None, now=NOW
    )
    assert decided.status == RequestStatus.APPROVED
    assert decided.approved_by == 2
    assert decided.approved_at == NOW


def test_department_manager_scoped_to_own_department():
    guard = StatusTransitionGuard()
    guard.check(actor=production_manager(), record=_record(), target=RequestStatus.APPROVED, remarks=None)

    with pytest.raises(AuthorizationError):
        guard.check(
            actor=production_manager(), record=_record(department="Warehouse"), target=RequestStatus.APPROVED, remarks=None
        )


def test_employee_cannot_approve_own_request():
    with pytest.raises(AuthorizationError):
        StatusTransitionGuard().check(actor=employee_ana(), record=_record(), target=RequestStatus.APPROVED, remarks=None)


def test_reject_requires_remarks():
    guard = StatusTransitionGuard()
    for remarks in (None, "", "   "):
        with pytest.raises(ValidationError) as exc:
            guard.check(actor=hrd(), record=_record(), target=RequestStatus.REJECTED, remarks=remarks)
        assert "remarks" in exc.value.errors

    decided = guard.transition(actor=hrd(), record=_record(), target=RequestStatus.REJECTED, remarks=" Duplicate ", now=NOW)
    assert decided.remarks == "Duplicate"


def test_only_pending_can_transition():
    with pytest.raises(ValidationError, match="already been approved"):
        StatusTransitionGuard().check(
            actor=hrd(), record=_record(status=RequestStatus.APPROVED), target=RequestStatus.REJECTED, remarks="x"
        )


def test_authorization_is_checked_before_state():
    # An outsider learns nothing about whether the record was already decided.
    with pytest.raises(AuthorizationError):
        StatusTransitionGuard().check(
            actor=employee_ana(), record=_record(status=RequestStatus.APPROVED), target=RequestStatus.APPROVED, remarks=None
        )


@pytest.mark.parametrize("actor_factory", [hrd, production_manager, employee_ana])
def test_force_approve_requires_superadmin(actor_factory):
    with pytest.raises(AuthorizationError):
        StatusTransitionGuard().check(
            actor=actor_factory(), record=_record(), target=RequestStatus.FORCE_APPROVED, remarks=None
        )


def test_force_approve_bypasses_department_scope_and_prefixes_remarks():
    guard = StatusTransitionGuard()
    decided = guard.transition(
        actor=superadmin(), record=_record(department="Warehouse"), target=RequestStatus.FORCE_APPROVED, remarks=None, now=NOW
    )
    assert decided.status == RequestStatus.FORCE_APPROVED
    assert decided.remarks == "Administrative override: Force approved by admin"

    decided = guard.transition(
        actor=superadmin(), record=_record(), target=RequestStatus.FORCE_APPROVED, remarks="Payroll cutoff", now=NOW
    )
    assert decided.remarks == "Administrative override: Payroll cutoff"


def test_remarks_length_limited():
    with pytest.raises(ValidationError) as exc:
        StatusTransitionGuard().check(actor=hrd(), record=_record(), target=RequestStatus.APPROVED, remarks="x" * 501)
    assert "remarks" in exc.value.errors
