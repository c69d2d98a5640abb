from __future__ import annotations

from typing import Dict, Iterable, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository


def _to_employee(row: dict) -> Employee:
    return Employee(
        employee_id=int(row["id"]),
        idno=str(row["idno"]),
        last_name=row["last_name"],
        first_name=row["first_name"],
        department=row.get("department"),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, idno, last_name, first_name, department, is_active FROM employees WHERE id=%s",
                (int(employee_id),),
            )
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def map_by_idno(self, idnos: Iterable[str]) -> Dict[str, Employee]:
        keys = sorted({str(i) for i in idnos})
        if not keys:
            return {}
        placeholders = ",".join(["%s"] * len(keys))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT id, idno, last_name, first_name, department, is_active
                FROM employees
                WHERE idno IN ({placeholders})
                """,
                tuple(keys),
            )
            return {str(r["idno"]): _to_employee(r) for r in fetchall(cur)}
