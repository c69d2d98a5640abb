from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from ..core.constants import DEFAULT_BIOMETRIC_PORT
from .connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().with_name("schema.sql")


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql usable regardless of the configured database name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal splitter for schema/seed files (handles ';' inside quotes and -- comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for line in sql.splitlines(keepends=True):
        if not in_single and not in_double and line.lstrip().startswith("--"):
            continue
        for ch in line:
            if escape:
                buf.append(ch)
                escape = False
                continue
            if ch == "\\":
                buf.append(ch)
                escape = True
                continue
            if ch == "'" and not in_double:
                in_single = not in_single
            elif ch == '"' and not in_single:
                in_double = not in_double
            elif ch == ";" and not in_single and not in_double:
                stmt = "".join(buf).strip()
                buf.clear()
                if stmt:
                    yield stmt
                continue
            buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(config: DBConfig) -> None:
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def _run_sql_file(config: DBConfig, path: Path) -> int:
    sql = _strip_create_db_and_use(path.read_text(encoding="utf-8"))
    conn = DatabaseConnection(config).connect()
    count = 0
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
    finally:
        conn.close()
    return count


def apply_schema(config: DBConfig, *, schema_path: str | Path) -> None:
    ensure_database_exists(config)
    count = _run_sql_file(config, Path(schema_path))
    logger.info("Applied %s schema statements to %s", count, config.database)


def ensure_demo_data(config: DBConfig) -> None:
    """Create demo departments, employees and one account per role (idempotent)."""

    conn = DatabaseConnection(config).connect()
    try:
        cur = conn.cursor(dictionary=True)

        employees = [
            ("1001", "Admin", "Super", "Administration"),
            ("1002", "Reyes", "Hannah", "Human Resources"),
            ("1003", "Santos", "Miguel", "Production"),
            ("1004", "Cruz", "Ana", "Production"),
            ("1005", "Garcia", "Leo", "Warehouse"),
        ]
        for idno, last_name, first_name, department in employees:
            cur.execute(
                """
                INSERT INTO employees(idno, last_name, first_name, department, is_active)
                VALUES(%s,%s,%s,%s,1)
                ON DUPLICATE KEY UPDATE last_name=VALUES(last_name), first_name=VALUES(first_name),
                                        department=VALUES(department)
                """,
                (idno, last_name, first_name, department),
            )

        def employee_id(idno: str) -> int:
            cur.execute("SELECT id FROM employees WHERE idno=%s", (idno,))
            row = cur.fetchone()
            if not row:
                raise RuntimeError(f"Missing employee idno={idno}")
            return int(row["id"])

        def upsert_user(name: str, username: str, password: str, idno: str, roles: list[str]) -> int:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT id FROM users WHERE username=%s", (username,))
            existing = cur.fetchone()
            if existing:
                user_id = int(existing["id"])
                cur.execute(
                    "UPDATE users SET name=%s, password_hash=%s, employee_id=%s, is_active=1 WHERE id=%s",
                    (name, password_hash, employee_id(idno), user_id),
                )
            else:
                cur.execute(
                    "INSERT INTO users(name, username, password_hash, employee_id, is_active) VALUES(%s,%s,%s,%s,1)",
                    (name, username, password_hash, employee_id(idno)),
                )
                user_id = int(cur.lastrowid)
            cur.execute("DELETE FROM user_roles WHERE user_id=%s", (user_id,))
            for role in roles:
                cur.execute("INSERT INTO user_roles(user_id, role) VALUES(%s,%s)", (user_id, role))
            return user_id

        upsert_user("Super Admin", "superadmin", "admin123", "1001", ["superadmin", "employee"])
        upsert_user("Hannah Reyes", "hrd", "hrd12345", "1002", ["hrd_manager", "employee"])
        manager_id = upsert_user("Miguel Santos", "msantos", "manager123", "1003", ["department_manager", "employee"])
        upsert_user("Ana Cruz", "acruz", "employee123", "1004", ["employee"])

        cur.execute(
            "INSERT IGNORE INTO department_managers(manager_id, department) VALUES(%s,%s)",
            (manager_id, "Production"),
        )
        cur.execute("SELECT COUNT(*) AS n FROM biometric_devices")
        if int(cur.fetchone()["n"]) == 0:
            cur.execute(
                "INSERT INTO biometric_devices(name, ip_address, port, location) VALUES(%s,%s,%s,%s)",
                ("Main Gate", "192.168.1.201", DEFAULT_BIOMETRIC_PORT, "Lobby"),
            )
        conn.commit()
    finally:
        conn.close()
    logger.info("Demo data ready in %s", config.database)


def list_tables(config: DBConfig) -> list[str]:
    conn = DatabaseConnection(config).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
