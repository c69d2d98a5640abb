from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import BiometricDevice, ProcessedAttendance
from .repository import BiometricRepository


class MySQLBiometricRepository(BiometricRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_device(self, device_id: int) -> Optional[BiometricDevice]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, name, ip_address, port, location, last_sync FROM biometric_devices WHERE id=%s",
                (int(device_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return BiometricDevice(
                device_id=int(r["id"]),
                name=r["name"],
                ip_address=r["ip_address"],
                port=int(r["port"]),
                location=r.get("location"),
                last_sync=r.get("last_sync"),
            )

    def upsert_attendance(self, rows: Sequence[ProcessedAttendance]) -> int:
        if not rows:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO processed_attendances(
                    employee_id, attendance_date, time_in, time_out, break_in, break_out,
                    hours_worked, is_nightshift, source, notes
                )
                VALUES(%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE
                    time_in=VALUES(time_in),
                    time_out=VALUES(time_out),
                    break_in=VALUES(break_in),
                    break_out=VALUES(break_out),
                    hours_worked=VALUES(hours_worked),
                    is_nightshift=VALUES(is_nightshift),
                    source=VALUES(source),
                    notes=VALUES(notes)
                """,
                [
                    (
                        r.employee_id,
                        r.attendance_date,
                        r.time_in,
                        r.time_out,
                        r.break_in,
                        r.break_out,
                        r.hours_worked,
                        1 if r.is_nightshift else 0,
                        r.source,
                        r.notes,
                    )
                    for r in rows
                ],
            )
        return len(rows)

    def touch_last_sync(self, device_id: int, synced_at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE biometric_devices SET last_sync=%s WHERE id=%s", (synced_at, int(device_id)))
