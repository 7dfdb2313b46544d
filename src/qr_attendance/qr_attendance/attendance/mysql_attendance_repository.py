from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.exceptions import DuplicateAttendanceError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, is_duplicate_key, to_mysql_datetime
from .model import AttendanceView
from .repository import AttendanceRepository

_VIEW_SELECT = """
    SELECT
        a.attendance_id, a.student_id, a.class_id, a.qr_session_id, a.marked_at,
        c.name AS class_name,
        p.full_name, p.roll_number
    FROM attendance a
    JOIN classes c ON c.class_id = a.class_id
    LEFT JOIN profiles p ON p.user_id = a.student_id
"""


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, student_id: int, qr_session_id: int, class_id: int, marked_at: datetime) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance(student_id, qr_session_id, class_id, marked_at)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (int(student_id), int(qr_session_id), int(class_id), to_mysql_datetime(marked_at)),
                )
                return int(cur.lastrowid)
        except Exception as e:
            if is_duplicate_key(e):
                raise DuplicateAttendanceError("Attendance already marked for this session") from e
            raise

    def list_for_student(
        self,
        *,
        student_id: int,
        class_id: Optional[int] = None,
        marked_from: Optional[datetime] = None,
        marked_before: Optional[datetime] = None,
    ) -> Sequence[AttendanceView]:
        clauses = ["a.student_id=%s"]
        params: list[object] = [int(student_id)]

        if class_id is not None:
            clauses.append("a.class_id=%s")
            params.append(int(class_id))
        if marked_from is not None:
            clauses.append("a.marked_at >= %s")
            params.append(to_mysql_datetime(marked_from))
        if marked_before is not None:
            clauses.append("a.marked_at < %s")
            params.append(to_mysql_datetime(marked_before))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_VIEW_SELECT}
                WHERE {where}
                ORDER BY a.marked_at DESC
                """,
                tuple(params),
            )
            return [AttendanceView.from_row(r) for r in fetchall(cur)]

    def list_recent(self, *, limit: int) -> Sequence[AttendanceView]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_VIEW_SELECT}
                ORDER BY a.marked_at DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [AttendanceView.from_row(r) for r in fetchall(cur)]
