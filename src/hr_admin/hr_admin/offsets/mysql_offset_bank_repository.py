from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchone
from .model import OffsetBank
from .repository import OffsetBankRepository


class MySQLOffsetBankRepository(OffsetBankRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, employee_id: int) -> Optional[OffsetBank]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, total_hours, used_hours, remaining_hours, last_updated, notes
                FROM offset_banks
                WHERE employee_id=%s
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return OffsetBank(
                employee_id=int(r["employee_id"]),
                total_hours=as_decimal(r["total_hours"]),
                used_hours=as_decimal(r["used_hours"]),
                remaining_hours=as_decimal(r["remaining_hours"]),
                last_updated=r.get("last_updated"),
                notes=r.get("notes"),
            )

    def credit(
        self,
        employee_id: int,
        hours: Decimal,
        *,
        notes: str,
        now: datetime,
        offset_id: Optional[int] = None,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO offset_banks(employee_id, total_hours, used_hours, remaining_hours, last_updated, notes)
                VALUES(%s, %s, 0, %s, %s, %s)
                ON DUPLICATE KEY UPDATE
                    total_hours = total_hours + VALUES(total_hours),
                    remaining_hours = remaining_hours + VALUES(remaining_hours),
                    last_updated = VALUES(last_updated),
                    notes = VALUES(notes)
                """,
                (int(employee_id), hours, hours, now, notes),
            )
            if offset_id is not None:
                cur.execute("UPDATE offsets SET is_bank_updated=1 WHERE id=%s", (int(offset_id),))

    def debit(
        self,
        employee_id: int,
        hours: Decimal,
        *,
        notes: str,
        now: datetime,
        offset_id: Optional[int] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # No row changes when the balance is short.
            cur.execute(
                """
                UPDATE offset_banks
                SET used_hours = used_hours + %s,
                    remaining_hours = remaining_hours - %s,
                    last_updated = %s,
                    notes = %s
                WHERE employee_id=%s AND remaining_hours >= %s
                """,
                (hours, hours, now, notes, int(employee_id), hours),
            )
            if cur.rowcount <= 0:
                return False
            if offset_id is not None:
                cur.execute("UPDATE offsets SET is_bank_updated=1 WHERE id=%s", (int(offset_id),))
            return True
