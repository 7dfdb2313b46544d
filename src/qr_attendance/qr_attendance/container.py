from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .classes.mysql_class_repository import MySQLClassRepository
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import StudentReportService
from .sessions.mysql_session_repository import MySQLQrSessionRepository
from .sessions.service import SessionIssuer
from .users.mysql_user_repository import MySQLProfileRepository, MySQLUserRepository
from .users.service import AuthService
from .users.session_provider import SessionProvider


@dataclass(frozen=True)
class Container:
    classes_repo: MySQLClassRepository

    session_provider: SessionProvider
    auth_service: AuthService
    session_issuer: SessionIssuer
    attendance_service: AttendanceService
    report_service: StudentReportService


def build_container(
    *,
    db_config: dict,
    tz: Optional[tzinfo] = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    users_repo = MySQLUserRepository(conn)
    profiles_repo = MySQLProfileRepository(conn)
    classes_repo = MySQLClassRepository(conn)
    sessions_repo = MySQLQrSessionRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)

    return Container(
        classes_repo=classes_repo,
        session_provider=SessionProvider(),
        auth_service=AuthService(users_repo, profiles_repo),
        session_issuer=SessionIssuer(sessions_repo, classes_repo),
        attendance_service=AttendanceService(attendance_repo, sessions_repo, tz=tz),
        report_service=StudentReportService(attendance_repo, profiles_repo, tz=tz),
    )
