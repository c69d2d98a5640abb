from __future__ import annotations

from decimal import Decimal

import pytest

from src.hr_admin.hr_admin.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.hr_admin.hr_admin.leave_banks.model import LeaveBank
from src.hr_admin.hr_admin.leave_banks.service import LeaveBankService
from tests.fakes import (
    NOW,
    InMemoryEmployees,
    InMemoryLeaveBanks,
    employee_ana,
    employee_leo,
    fixed_clock,
    hrd,
    production_manager,
)


@pytest.fixture
def banks():
    return InMemoryLeaveBanks()


@pytest.fixture
def service(banks):
    return LeaveBankService(banks, InMemoryEmployees(), clock=fixed_clock)


def test_get_bank_lists_sick_and_vacation_for_the_year(service, banks):
    banks.banks[(4, "sick", 2025)] = LeaveBank(4, "sick", 2025, total_days=Decimal("10"), used_days=Decimal("2.5"))

    current = service.get_bank(employee_ana(), 4)
    assert [(b.leave_type, b.year, b.remaining_days) for b in current] == [
        ("sick", 2026, Decimal("0")),
        ("vacation", 2026, Decimal("0")),
    ]

    last_year = service.get_bank(employee_ana(), 4, "2025")
    assert last_year[0].to_dict()["remaining_days"] == 7.5


def test_get_bank_visibility(service):
    assert service.get_bank(production_manager(), 4)[0].employee_id == 4
    assert service.get_bank(hrd(), 5)[0].employee_id == 5

    with pytest.raises(AuthorizationError):
        service.get_bank(employee_leo(), 4)
    with pytest.raises(AuthorizationError):
        service.get_bank(production_manager(), 5)
    with pytest.raises(NotFoundError):
        service.get_bank(hrd(), 99)
    with pytest.raises(ValidationError):
        service.get_bank(hrd(), 4, "this year")


def test_add_days_creates_then_tops_up(service, banks):
    bank = service.add_days(hrd(), {"employee_id": "4", "leave_type": "vacation", "days": "5", "year": "2026"})
    assert bank.total_days == Decimal("5")

    bank = service.add_days(hrd(), {"employee_id": 4, "leave_type": "vacation", "days": "2.5", "notes": "Loyalty award"})

    assert bank.total_days == Decimal("7.5")
    assert bank.year == 2026
    assert banks.get(4, "vacation", 2026).notes.endswith("2026-03-02 09:30 - Added 2.5 days by user2: Loyalty award")
    assert banks.get(4, "vacation", 2026).last_updated == NOW


def test_add_days_validation(service):
    with pytest.raises(ValidationError) as exc:
        service.add_days(hrd(), {"employee_id": "4", "leave_type": "emergency", "days": "0.25"})
    assert set(exc.value.errors) == {"leave_type", "days"}

    with pytest.raises(ValidationError) as exc:
        service.add_days(hrd(), {"employee_id": "4", "leave_type": "sick", "days": "1", "year": "2019"})
    assert "year" in exc.value.errors

    with pytest.raises(NotFoundError):
        service.add_days(hrd(), {"employee_id": "99", "leave_type": "sick", "days": "1"})


def test_add_days_requires_privilege(service):
    for actor in (production_manager(), employee_ana()):
        with pytest.raises(AuthorizationError):
            service.add_days(actor, {"employee_id": "4", "leave_type": "sick", "days": "1"})


def test_ensure_available_opens_default_bank(service, banks):
    service.ensure_available(4, "sick", 2026, Decimal("15"))

    bank = banks.get(4, "sick", 2026)
    assert bank.total_days == Decimal("15")
    assert bank.notes == "Auto-created default bank for year 2026"

    with pytest.raises(ValidationError, match="has 15 days available out of 15 total days"):
        service.ensure_available(4, "sick", 2026, Decimal("15.5"))


def test_existing_bank_is_not_reset_to_default(service, banks):
    banks.banks[(4, "vacation", 2026)] = LeaveBank(4, "vacation", 2026, total_days=Decimal("3"))

    with pytest.raises(ValidationError, match="Insufficient vacation leave days for year 2026"):
        service.ensure_available(4, "vacation", 2026, Decimal("4"))
    assert banks.get(4, "vacation", 2026).total_days == Decimal("3")


def test_deduct_uses_days_and_never_goes_negative(service, banks):
    banks.banks[(4, "sick", 2026)] = LeaveBank(4, "sick", 2026, total_days=Decimal("2"), notes="opening")

    service.deduct(employee_id=4, leave_type="sick", year=2026, days=Decimal("1.5"), leave_id=21)
    bank = banks.get(4, "sick", 2026)
    assert bank.used_days == Decimal("1.5")
    assert bank.notes.endswith("2026-03-02 09:30 - Used 1.5 days for leave ID 21")

    with pytest.raises(ValidationError, match="Leave #22: Insufficient days"):
        service.deduct(employee_id=4, leave_type="sick", year=2026, days=Decimal("1"), leave_id=22)
    assert banks.get(4, "sick", 2026).remaining_days == Decimal("0.5")


@pytest.mark.parametrize("year, ok", [(2021, True), (2020, False), (2028, True), (2029, False)])
def test_year_window(service, year, ok):
    assert (service.year_error(year) is None) is ok


def test_only_paid_sick_and_vacation_draw_on_bank():
    assert LeaveBankService.draws_on_bank("sick", True)
    assert LeaveBankService.draws_on_bank("vacation", True)
    assert not LeaveBankService.draws_on_bank("vacation", False)
    assert not LeaveBankService.draws_on_bank("emergency", True)
