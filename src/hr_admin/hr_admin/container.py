from __future__ import annotations

from dataclasses import dataclass

from .biometric.device import zk_client_factory
from .biometric.mysql_biometric_repository import MySQLBiometricRepository
from .biometric.service import BiometricService
from .core.constants import DEFAULT_BIOMETRIC_TIMEOUT, DEFAULT_EXPORT_ROW_LIMIT
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .leave_banks.mysql_leave_bank_repository import MySQLLeaveBankRepository
from .leave_banks.service import LeaveBankService
from .offsets.mysql_offset_bank_repository import MySQLOffsetBankRepository
from .offsets.service import OffsetBankService
from .requests.registry import build_registry
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService
from .workflow.mysql_request_repository import MySQLRequestRepository
from .workflow.service import ApprovalService


@dataclass(frozen=True)
class Container:
    """Services the controllers use. Tests build one from in-memory fakes."""

    auth_service: AuthService
    approval_service: ApprovalService
    offset_bank_service: OffsetBankService
    leave_bank_service: LeaveBankService
    biometric_service: BiometricService


def build_container(
    *,
    db_config: dict,
    biometric_timeout: int = DEFAULT_BIOMETRIC_TIMEOUT,
    export_row_limit: int = DEFAULT_EXPORT_ROW_LIMIT,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    users_repo = MySQLUserRepository(conn)
    employees_repo = MySQLEmployeeRepository(conn)
    requests_repo = MySQLRequestRepository(conn)
    offset_banks_repo = MySQLOffsetBankRepository(conn)
    leave_banks_repo = MySQLLeaveBankRepository(conn)
    biometric_repo = MySQLBiometricRepository(conn)

    offset_bank_service = OffsetBankService(offset_banks_repo, employees_repo)
    leave_bank_service = LeaveBankService(leave_banks_repo, employees_repo)
    approval_service = ApprovalService(
        requests_repo,
        employees_repo,
        build_registry(offset_bank_service, leave_bank_service),
        export_row_limit=export_row_limit,
    )
    biometric_service = BiometricService(
        biometric_repo,
        employees_repo,
        zk_client_factory(biometric_timeout),
    )

    return Container(
        auth_service=AuthService(users_repo),
        approval_service=approval_service,
        offset_bank_service=offset_bank_service,
        leave_bank_service=leave_bank_service,
        biometric_service=biometric_service,
    )
