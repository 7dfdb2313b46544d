from __future__ import annotations

import csv
import io
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from src.qr_attendance.qr_attendance.attendance.model import AttendanceView
from src.qr_attendance.qr_attendance.core.enums import Role
from src.qr_attendance.qr_attendance.core.exceptions import ValidationError
from src.qr_attendance.qr_attendance.reports.service import StudentReportService


def _view(i, class_name, marked_at):
    return AttendanceView(
        attendance_id=i,
        student_id=2,
        class_id=1,
        class_name=class_name,
        qr_session_id=i,
        marked_at=marked_at,
    )


def test_csv_has_header_even_without_rows(attendance_repo, users_repo):
    service = StudentReportService(attendance_repo, users_repo)

    assert service.history_csv([]) == "Class,Date,Time\n"


def test_csv_row_count_matches_records(attendance_repo, users_repo):
    service = StudentReportService(attendance_repo, users_repo)
    rows = [
        _view(1, "Math", datetime(2026, 10, 19, 9, 0, 5, tzinfo=timezone.utc)),
        _view(2, "Physics, Lab", datetime(2026, 10, 18, 14, 30, tzinfo=timezone.utc)),
    ]

    parsed = list(csv.reader(io.StringIO(service.history_csv(rows))))

    assert parsed[0] == ["Class", "Date", "Time"]
    assert parsed[1:] == [
        ["Math", "2026-10-19", "09:00:05"],
        ["Physics, Lab", "2026-10-18", "14:30:00"],
    ]


def test_csv_uses_display_timezone(attendance_repo, users_repo):
    service = StudentReportService(attendance_repo, users_repo, tz=ZoneInfo("America/New_York"))

    body = service.history_csv([_view(1, "Math", datetime(2026, 10, 19, 2, 15, tzinfo=timezone.utc))])

    assert body.splitlines()[1] == "Math,2026-10-18,22:15:00"


def test_student_profile_bundles_records_and_stats(container, sessions_repo, fixed_now):
    issued = container.session_issuer.issue(current_role=Role.TEACHER, class_id=1, teacher_id=1, now=fixed_now)
    container.attendance_service.mark_from_token(
        current_role=Role.STUDENT, student_id=2, token=issued.token, now=fixed_now
    )

    report = container.report_service.student_profile(student_id=2, today=date(2026, 10, 19))

    assert report.profile.full_name == "Sam Student"
    assert len(report.records) == 1
    assert report.stats.overall.current_streak == 1
    assert report.stats.classes[0].class_name == "Math"


def test_unknown_student_profile(container):
    with pytest.raises(ValidationError):
        container.report_service.student_profile(student_id=42)
