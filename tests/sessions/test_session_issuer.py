from __future__ import annotations

from datetime import timedelta

import pytest

from src.qr_attendance.qr_attendance.common.datetime_utils import to_millis
from src.qr_attendance.qr_attendance.core.enums import Role
from src.qr_attendance.qr_attendance.core.exceptions import (
    AuthorizationError,
    InvalidTokenError,
    SessionIssueError,
    ValidationError,
)
from src.qr_attendance.qr_attendance.sessions.model import ClassSession
from src.qr_attendance.qr_attendance.sessions.service import SessionIssuer


def test_issue_builds_token_and_sixty_second_expiry(sessions_repo, classes_repo, fixed_now):
    issuer = SessionIssuer(sessions_repo, classes_repo)

    issued = issuer.issue(current_role=Role.TEACHER, class_id=1, teacher_id=7, now=fixed_now)

    assert issued.token == f"1_{to_millis(fixed_now)}"
    assert issued.expires_at == fixed_now + timedelta(seconds=60)
    assert issued.expires_at_millis - issued.issued_at_millis == 60_000


def test_issue_persists_before_returning(sessions_repo, classes_repo, fixed_now):
    issuer = SessionIssuer(sessions_repo, classes_repo)

    issued = issuer.issue(current_role=Role.TEACHER, class_id=2, teacher_id=7, now=fixed_now)

    stored = sessions_repo.get_by_token(issued.token)
    assert stored is not None
    assert stored.class_id == 2
    assert stored.teacher_id == 7
    assert stored.expires_at == issued.expires_at


def test_issue_surfaces_generic_failure_when_store_fails(sessions_repo, classes_repo, fixed_now):
    sessions_repo.fail_with = RuntimeError("connection refused")
    issuer = SessionIssuer(sessions_repo, classes_repo)

    with pytest.raises(SessionIssueError) as exc:
        issuer.issue(current_role=Role.TEACHER, class_id=1, teacher_id=7, now=fixed_now)

    assert str(exc.value) == "Failed to generate QR code"
    assert sessions_repo.by_token == {}


def test_issue_requires_class_selection(sessions_repo, classes_repo):
    issuer = SessionIssuer(sessions_repo, classes_repo)

    with pytest.raises(ValidationError):
        issuer.issue(current_role=Role.TEACHER, class_id=None, teacher_id=7)

    with pytest.raises(ValidationError):
        issuer.issue(current_role=Role.TEACHER, class_id=99, teacher_id=7)


def test_students_cannot_issue(sessions_repo, classes_repo):
    issuer = SessionIssuer(sessions_repo, classes_repo)

    with pytest.raises(AuthorizationError):
        issuer.issue(current_role=Role.STUDENT, class_id=1, teacher_id=2)


def test_seconds_left_uses_stored_expiry(sessions_repo, classes_repo, fixed_now):
    issuer = SessionIssuer(sessions_repo, classes_repo)
    issued = issuer.issue(current_role=Role.TEACHER, class_id=1, teacher_id=7, now=fixed_now)

    assert issuer.seconds_left(issued.token, now=fixed_now) == 60
    assert issuer.seconds_left(issued.token, now=fixed_now + timedelta(milliseconds=59_001)) == 1
    assert issuer.seconds_left(issued.token, now=fixed_now + timedelta(seconds=60)) == 0

    with pytest.raises(InvalidTokenError):
        issuer.seconds_left("1_123", now=fixed_now)


def test_class_session_valid_strictly_before_expiry():
    session = ClassSession(class_id=3, issued_at_millis=1_000)

    assert session.is_valid_at(1_000)
    assert session.is_valid_at(60_999)
    assert not session.is_valid_at(61_000)
