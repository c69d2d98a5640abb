from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Sequence

from ..common.fields import FieldKind, FieldSpec
from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, as_time, db_cursor, fetchall, fetchone
from .definition import ResourceDefinition
from .model import RequestFilter, RequestRecord, RequestScope
from .repository import RequestRepository

# Table and column names come from ResourceDefinition objects, never from request input.


def _from_db(spec: FieldSpec, value: Any) -> Any:
    if value is None:
        return None
    if spec.kind == FieldKind.TIME:
        return as_time(value)
    if spec.kind == FieldKind.BOOLEAN:
        return bool(value)
    if spec.kind == FieldKind.DECIMAL:
        return as_decimal(value)
    if spec.kind == FieldKind.INTEGER:
        return int(value)
    return value


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _select(definition: ResourceDefinition) -> str:
        detail_cols = "".join(f", r.`{c}`" for c in definition.columns)
        return f"""
            SELECT r.id, r.employee_id, r.reason, r.status, r.remarks,
                   r.created_by, r.approved_by, r.approved_at, r.created_at,
                   e.first_name, e.last_name, e.department{detail_cols}
            FROM `{definition.table}` r
            JOIN employees e ON e.id = r.employee_id
        """

    @staticmethod
    def _to_record(definition: ResourceDefinition, r: Dict[str, Any]) -> RequestRecord:
        details = {spec.name: _from_db(spec, r.get(spec.name)) for spec in definition.column_specs}
        return RequestRecord(
            request_id=int(r["id"]),
            resource=definition.key,
            employee_id=int(r["employee_id"]),
            employee_name=f"{r['last_name']}, {r['first_name']}",
            department=r.get("department"),
            status=RequestStatus(r["status"]),
            reason=r.get("reason") or "",
            details=details,
            created_at=r["created_at"],
            remarks=r.get("remarks"),
            created_by=r.get("created_by"),
            approved_by=r.get("approved_by"),
            approved_at=r.get("approved_at"),
        )

    def create(
        self,
        definition: ResourceDefinition,
        *,
        employee_id: int,
        reason: str,
        created_by: int,
        details: Mapping[str, Any],
    ) -> int:
        columns = ["employee_id", "reason", "status", "created_by"] + list(definition.columns)
        values = [int(employee_id), reason, RequestStatus.PENDING.value, int(created_by)]
        values += [details.get(c) for c in definition.columns]
        placeholders = ",".join(["%s"] * len(columns))
        col_sql = ", ".join(f"`{c}`" for c in columns)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO `{definition.table}`({col_sql}) VALUES({placeholders})",
                tuple(values),
            )
            return int(cur.lastrowid)

    def get(self, definition: ResourceDefinition, *, request_id: int) -> Optional[RequestRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(self._select(definition) + " WHERE r.id=%s", (int(request_id),))
            r = fetchone(cur)
            return self._to_record(definition, r) if r else None

    def find_duplicate(
        self,
        definition: ResourceDefinition,
        *,
        employee_id: int,
        keys: Mapping[str, Any],
    ) -> Optional[int]:
        clauses = ["employee_id=%s", "status<>%s"]
        params: list[object] = [int(employee_id), RequestStatus.REJECTED.value]
        for column, value in keys.items():
            if column not in definition.columns:
                raise ValueError(f"{column} is not a column of {definition.table}")
            clauses.append(f"`{column}`=%s")
            params.append(value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT id FROM `{definition.table}` WHERE {' AND '.join(clauses)} LIMIT 1",
                tuple(params),
            )
            r = fetchone(cur)
            return int(r["id"]) if r else None

    def list(
        self,
        definition: ResourceDefinition,
        *,
        scope: RequestScope,
        filters: RequestFilter,
        limit: int = 500,
    ) -> Sequence[RequestRecord]:
        clauses = ["1=1"]
        params: list[object] = []

        if not scope.unrestricted:
            visible = []
            if scope.employee_id is not None:
                visible.append("r.employee_id=%s")
                params.append(int(scope.employee_id))
            if scope.departments:
                departments = sorted(scope.departments)
                visible.append(f"e.department IN ({','.join(['%s'] * len(departments))})")
                params.extend(departments)
            if not visible:
                return []
            clauses.append("(" + " OR ".join(visible) + ")")

        if filters.status is not None:
            clauses.append("r.status=%s")
            params.append(filters.status.value)
        if filters.search:
            like = f"%{filters.search.strip()}%"
            clauses.append("(e.first_name LIKE %s OR e.last_name LIKE %s OR e.idno LIKE %s)")
            params.extend([like, like, like])
        if filters.from_date is not None:
            clauses.append(f"r.`{definition.date_field}` >= %s")
            params.append(filters.from_date)
        if filters.to_date is not None:
            clauses.append(f"r.`{definition.date_field}` <= %s")
            params.append(filters.to_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                self._select(definition)
                + f" WHERE {' AND '.join(clauses)} ORDER BY r.created_at DESC, r.id DESC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [self._to_record(definition, r) for r in fetchall(cur)]

    def decide(
        self,
        definition: ResourceDefinition,
        *,
        request_id: int,
        status: RequestStatus,
        approved_by: int,
        approved_at: datetime,
        remarks: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE `{definition.table}`
                SET status=%s, approved_by=%s, approved_at=%s, remarks=%s
                WHERE id=%s AND status=%s
                """,
                (
                    status.value,
                    int(approved_by),
                    approved_at,
                    remarks,
                    int(request_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def revert_to_pending(self, definition: ResourceDefinition, *, request_id: int, status: RequestStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE `{definition.table}`
                SET status=%s, approved_by=NULL, approved_at=NULL, remarks=NULL
                WHERE id=%s AND status=%s
                """,
                (RequestStatus.PENDING.value, int(request_id), status.value),
            )
            return cur.rowcount > 0

    def delete_pending(self, definition: ResourceDefinition, *, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"DELETE FROM `{definition.table}` WHERE id=%s AND status=%s",
                (int(request_id), RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0
