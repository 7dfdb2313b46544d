from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, to_mysql_datetime
from .model import QrSession
from .repository import QrSessionRepository


class MySQLQrSessionRepository(QrSessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, class_id: int, teacher_id: int, token: str, expires_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO qr_sessions(class_id, teacher_id, qr_data, expires_at)
                VALUES(%s,%s,%s,%s)
                """,
                (int(class_id), int(teacher_id), token, to_mysql_datetime(expires_at)),
            )
            return int(cur.lastrowid)

    def get_by_token(self, token: str) -> Optional[QrSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT session_id, class_id, teacher_id, qr_data, expires_at
                FROM qr_sessions
                WHERE qr_data=%s
                """,
                (token,),
            )
            row = fetchone(cur)
            return QrSession.from_row(row) if row else None
