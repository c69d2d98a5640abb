from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchone
from .model import LeaveBank
from .repository import LeaveBankRepository


class MySQLLeaveBankRepository(LeaveBankRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, employee_id: int, leave_type: str, year: int) -> Optional[LeaveBank]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, leave_type, year, total_days, used_days, notes, updated_at
                FROM slvl_banks
                WHERE employee_id=%s AND leave_type=%s AND year=%s
                """,
                (int(employee_id), leave_type, int(year)),
            )
            r = fetchone(cur)
            if not r:
                return None
            return LeaveBank(
                employee_id=int(r["employee_id"]),
                leave_type=r["leave_type"],
                year=int(r["year"]),
                total_days=as_decimal(r["total_days"]),
                used_days=as_decimal(r["used_days"]),
                notes=r.get("notes"),
                last_updated=r.get("updated_at"),
            )

    def open(self, employee_id: int, leave_type: str, year: int, days: Decimal, *, notes: str, now: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO slvl_banks(employee_id, leave_type, year, total_days, used_days, notes, created_at, updated_at)
                VALUES(%s, %s, %s, %s, 0, %s, %s, %s)
                """,
                (int(employee_id), leave_type, int(year), days, notes, now, now),
            )

    def add_days(self, employee_id: int, leave_type: str, year: int, days: Decimal, *, notes: str, now: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO slvl_banks(employee_id, leave_type, year, total_days, used_days, notes, created_at, updated_at)
                VALUES(%s, %s, %s, %s, 0, %s, %s, %s)
                ON DUPLICATE KEY UPDATE
                    total_days = total_days + VALUES(total_days),
                    notes = CONCAT_WS('\n', notes, VALUES(notes)),
                    updated_at = VALUES(updated_at)
                """,
                (int(employee_id), leave_type, int(year), days, notes, now, now),
            )

    def use_days(self, employee_id: int, leave_type: str, year: int, days: Decimal, *, notes: str, now: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # No row changes when the balance is short.
            cur.execute(
                """
                UPDATE slvl_banks
                SET used_days = used_days + %s,
                    notes = CONCAT_WS('\n', notes, %s),
                    updated_at = %s
                WHERE employee_id=%s AND leave_type=%s AND year=%s AND total_days - used_days >= %s
                """,
                (days, notes, now, int(employee_id), leave_type, int(year), days),
            )
            return cur.rowcount > 0
