from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..common.datetime_utils import as_utc
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def is_duplicate_key(exc: Exception) -> bool:
    """True for a UNIQUE/PRIMARY KEY violation (ER_DUP_ENTRY)."""
    return isinstance(exc, IntegrityError) and getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY


def to_mysql_datetime(value: datetime) -> datetime:
    """DATETIME columns hold naive UTC."""
    return as_utc(value).replace(tzinfo=None)


def normalize_mysql_datetime(value: Any) -> Optional[datetime]:
    """Normalize MySQL DATETIME values into aware UTC datetimes.

    mysql-connector can return DATETIME as:
    - datetime.datetime (naive, stored as UTC)
    - string (e.g. '2026-10-19 08:30:00.123')
    """

    if value is None:
        return None

    if isinstance(value, datetime):
        return as_utc(value)

    if isinstance(value, str):
        text = value.strip()
        for fmt in ("%Y-%m-%d %H:%M:%S.%f", "%Y-%m-%d %H:%M:%S"):
            try:
                return datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
            except ValueError:
                continue
        raise ValueError(f"Invalid datetime string: {value!r}")

    raise TypeError(f"Unsupported MySQL DATETIME value type: {type(value)!r}")
