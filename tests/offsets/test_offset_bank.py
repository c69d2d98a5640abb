from __future__ import annotations

from decimal import Decimal

import pytest

from src.hr_admin.hr_admin.core.enums import TransactionType
from src.hr_admin.hr_admin.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.hr_admin.hr_admin.offsets.model import OffsetBank
from src.hr_admin.hr_admin.offsets.service import OffsetBankService
from tests.fakes import (
    NOW,
    InMemoryEmployees,
    InMemoryOffsetBanks,
    employee_ana,
    employee_leo,
    fixed_clock,
    hrd,
    production_manager,
)


@pytest.fixture
def banks():
    return InMemoryOffsetBanks()


@pytest.fixture
def service(banks):
    return OffsetBankService(banks, InMemoryEmployees(), clock=fixed_clock)


def test_balance_is_zero_without_bank(service):
    bank = service.balance(4)
    assert bank.remaining_hours == Decimal("0")
    assert bank.to_dict()["total_hours"] == 0.0


def test_get_bank_visibility(service):
    assert service.get_bank(employee_ana(), 4).employee_id == 4
    assert service.get_bank(production_manager(), 4).employee_id == 4
    assert service.get_bank(hrd(), 5).employee_id == 5

    with pytest.raises(AuthorizationError):
        service.get_bank(employee_leo(), 4)
    with pytest.raises(AuthorizationError):
        service.get_bank(production_manager(), 5)
    with pytest.raises(NotFoundError):
        service.get_bank(hrd(), 99)


def test_add_hours_defaults_notes(service, banks):
    bank = service.add_hours(hrd(), {"employee_id": "4", "hours": "8"})

    assert bank.total_hours == Decimal("8")
    assert bank.remaining_hours == Decimal("8")
    assert banks.get(4).notes == "Manual addition by user2"
    assert banks.get(4).last_updated == NOW


def test_add_hours_validation(service):
    with pytest.raises(ValidationError) as exc:
        service.add_hours(hrd(), {"employee_id": "4", "hours": "0.25"})
    assert "hours" in exc.value.errors

    with pytest.raises(ValidationError):
        service.add_hours(hrd(), {"employee_id": "4", "hours": "101"})

    with pytest.raises(NotFoundError):
        service.add_hours(hrd(), {"employee_id": "99", "hours": "4"})


def test_add_hours_requires_privilege(service):
    with pytest.raises(AuthorizationError):
        service.add_hours(production_manager(), {"employee_id": "4", "hours": "8"})


def test_ensure_available(service, banks):
    banks.banks[4] = OffsetBank(employee_id=4, total_hours=Decimal("4"), remaining_hours=Decimal("4"))

    service.ensure_available(4, Decimal("4"))
    with pytest.raises(ValidationError, match="only has 4 hours available"):
        service.ensure_available(4, Decimal("4.5"))


def test_post_credit_then_debit(service, banks):
    service.post(employee_id=4, hours=Decimal("8"), transaction_type=TransactionType.CREDIT, offset_id=11)
    assert banks.get(4).notes == "Credit from offset ID 11"

    service.post(employee_id=4, hours=Decimal("3"), transaction_type=TransactionType.DEBIT, offset_id=12)

    bank = banks.get(4)
    assert bank.total_hours == Decimal("8")
    assert bank.used_hours == Decimal("3")
    assert bank.remaining_hours == Decimal("5")
    assert banks.posted_offsets == [11, 12]


def test_post_debit_never_goes_negative(service, banks):
    banks.banks[4] = OffsetBank(employee_id=4, total_hours=Decimal("2"), remaining_hours=Decimal("2"))

    with pytest.raises(ValidationError, match="Offset #13: Insufficient hours"):
        service.post(employee_id=4, hours=Decimal("3"), transaction_type=TransactionType.DEBIT, offset_id=13)

    assert banks.get(4).remaining_hours == Decimal("2")
    assert banks.posted_offsets == []
