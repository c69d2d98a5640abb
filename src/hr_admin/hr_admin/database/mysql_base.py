from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, time, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor) for one unit of work.

    Commits when the block exits normally and rolls back otherwise. The
    connection is always closed.
    """
    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def as_time(value: Any) -> Optional[time]:
    """TIME columns arrive as `time`, `timedelta` or 'HH:MM[:SS]' depending on the connector build."""

    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        return (datetime.min + timedelta(seconds=int(value.total_seconds()) % 86400)).time()
    if isinstance(value, str):
        for fmt in ("%H:%M:%S", "%H:%M"):
            try:
                return datetime.strptime(value.strip(), fmt).time()
            except ValueError:
                continue
        raise ValueError(f"Invalid time string: {value!r}")
    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")


def as_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))
