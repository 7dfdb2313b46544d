from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Optional

import pytest

os.environ.setdefault("APP_ENV", "testing")

from src.qr_attendance.qr_attendance.attendance.model import AttendanceView
from src.qr_attendance.qr_attendance.attendance.service import AttendanceService
from src.qr_attendance.qr_attendance.classes.model import SchoolClass
from src.qr_attendance.qr_attendance.container import Container
from src.qr_attendance.qr_attendance.core.exceptions import DuplicateAttendanceError, DuplicateRegistrationError
from src.qr_attendance.qr_attendance.reports.service import StudentReportService
from src.qr_attendance.qr_attendance.sessions.model import QrSession
from src.qr_attendance.qr_attendance.sessions.service import SessionIssuer
from src.qr_attendance.qr_attendance.users.model import Profile, User
from src.qr_attendance.qr_attendance.users.service import AuthService
from src.qr_attendance.qr_attendance.users.session_provider import SessionProvider


class InMemoryClasses:
    def __init__(self, classes: list[SchoolClass]):
        self._classes = {c.class_id: c for c in classes}

    def list_all(self):
        return sorted(self._classes.values(), key=lambda c: c.name)

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        return self._classes.get(int(class_id))


class InMemorySessions:
    def __init__(self):
        self.by_token: dict[str, QrSession] = {}
        self.fail_with: Optional[Exception] = None
        self._id = 0

    def create(self, *, class_id: int, teacher_id: int, token: str, expires_at: datetime) -> int:
        if self.fail_with:
            raise self.fail_with
        self._id += 1
        self.by_token[token] = QrSession(
            session_id=self._id,
            class_id=class_id,
            teacher_id=teacher_id,
            token=token,
            expires_at=expires_at,
        )
        return self._id

    def get_by_token(self, token: str) -> Optional[QrSession]:
        return self.by_token.get(token)


class InMemoryAttendance:
    def __init__(self, class_names: dict[int, str], profiles: dict[int, Profile] | None = None):
        self._class_names = class_names
        self._profiles = profiles or {}
        self.rows: list[AttendanceView] = []
        self.fail_with: Optional[Exception] = None
        self.last_query: Optional[dict] = None

    def create(self, *, student_id: int, qr_session_id: int, class_id: int, marked_at: datetime) -> int:
        if self.fail_with:
            raise self.fail_with
        if any(r.student_id == student_id and r.qr_session_id == qr_session_id for r in self.rows):
            raise DuplicateAttendanceError("Attendance already marked for this session")
        profile = self._profiles.get(student_id)
        view = AttendanceView(
            attendance_id=len(self.rows) + 1,
            student_id=student_id,
            class_id=class_id,
            class_name=self._class_names[class_id],
            qr_session_id=qr_session_id,
            marked_at=marked_at,
            student_name=profile.full_name if profile else None,
            roll_number=profile.roll_number if profile else None,
        )
        self.rows.append(view)
        return view.attendance_id

    def list_for_student(self, *, student_id, class_id=None, marked_from=None, marked_before=None):
        self.last_query = {
            "student_id": student_id,
            "class_id": class_id,
            "marked_from": marked_from,
            "marked_before": marked_before,
        }
        items = [
            r
            for r in self.rows
            if r.student_id == student_id
            and (class_id is None or r.class_id == class_id)
            and (marked_from is None or r.marked_at >= marked_from)
            and (marked_before is None or r.marked_at < marked_before)
        ]
        return sorted(items, key=lambda r: r.marked_at, reverse=True)

    def list_recent(self, *, limit: int):
        return sorted(self.rows, key=lambda r: r.marked_at, reverse=True)[:limit]


class InMemoryUsers:
    def __init__(self):
        self.by_id: dict[int, User] = {}
        self.profiles: dict[int, Profile] = {}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.by_id.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.by_id.values() if u.email == email), None)

    def create_user(self, *, email, password_hash, role, full_name, roll_number) -> int:
        if self.get_by_email(email):
            raise DuplicateRegistrationError("This email is already registered")
        user_id = len(self.by_id) + 1
        self.by_id[user_id] = User(user_id=user_id, email=email, password_hash=password_hash, role=role)
        self.profiles[user_id] = Profile(
            profile_id=user_id, user_id=user_id, full_name=full_name, roll_number=roll_number
        )
        return user_id

    def get_by_user_id(self, user_id: int) -> Optional[Profile]:
        return self.profiles.get(user_id)


TEACHER = {"user_id": 1, "email": "teacher@example.com", "full_name": "Ms Teacher", "role": "teacher", "roll_number": None}
STUDENT = {"user_id": 2, "email": "student@example.com", "full_name": "Sam Student", "role": "student", "roll_number": "CS-001"}


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 10, 19, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def classes_repo() -> InMemoryClasses:
    return InMemoryClasses([SchoolClass(1, "Math"), SchoolClass(2, "Physics")])


@pytest.fixture
def sessions_repo() -> InMemorySessions:
    return InMemorySessions()


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers()


@pytest.fixture
def attendance_repo(classes_repo) -> InMemoryAttendance:
    profiles = {2: Profile(profile_id=2, user_id=2, full_name="Sam Student", roll_number="CS-001")}
    return InMemoryAttendance({c.class_id: c.name for c in classes_repo.list_all()}, profiles)


@pytest.fixture
def container(classes_repo, sessions_repo, attendance_repo, users_repo) -> Container:
    users_repo.profiles[2] = Profile(profile_id=2, user_id=2, full_name="Sam Student", roll_number="CS-001")
    return Container(
        classes_repo=classes_repo,
        session_provider=SessionProvider(),
        auth_service=AuthService(users_repo, users_repo),
        session_issuer=SessionIssuer(sessions_repo, classes_repo),
        attendance_service=AttendanceService(attendance_repo, sessions_repo),
        report_service=StudentReportService(attendance_repo, users_repo),
    )


@pytest.fixture
def app(container):
    from src.qr_attendance.qr_attendance.main import create_app

    app = create_app(container=container)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login_as(client):
    def _login(user: dict) -> None:
        with client.session_transaction() as s:
            s["auth_user"] = dict(user)

    return _login


@pytest.fixture
def zbar():
    """Skip unless pyzbar and the zbar shared library can both be loaded."""
    zbar_library = pytest.importorskip("pyzbar.zbar_library")
    try:
        zbar_library.load()
    except (ImportError, OSError):
        pytest.skip("zbar shared library not available")
