from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import date, tzinfo
from typing import Iterable, Optional, Sequence

from ..attendance.model import AttendanceView
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import as_utc, now_utc
from ..core.constants import HISTORY_CSV_HEADER
from ..core.exceptions import ValidationError
from ..users.model import Profile
from ..users.repository import ProfileRepository
from .aggregator import StudentStats, summarize


@dataclass(frozen=True)
class StudentProfileReport:
    profile: Profile
    records: Sequence[AttendanceView]
    stats: StudentStats


class StudentReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        profiles: ProfileRepository,
        *,
        tz: Optional[tzinfo] = None,
    ):
        self._attendance = attendance
        self._profiles = profiles
        self._tz = tz

    def today(self) -> date:
        now = now_utc()
        return now.astimezone(self._tz).date() if self._tz else now.date()

    def student_profile(self, *, student_id: int, today: Optional[date] = None) -> StudentProfileReport:
        profile = self._profiles.get_by_user_id(int(student_id))
        if not profile:
            raise ValidationError("Student not found")

        records = self._attendance.list_for_student(student_id=int(student_id))
        stats = summarize(records, today=today or self.today(), tz=self._tz)
        return StudentProfileReport(profile=profile, records=records, stats=stats)

    def history_csv(self, rows: Iterable[AttendanceView]) -> str:
        """CSV of the given rows; header is written even when there are none."""
        out = io.StringIO()
        writer = csv.writer(out, lineterminator="\n")
        writer.writerow(HISTORY_CSV_HEADER)
        for r in rows:
            local = as_utc(r.marked_at).astimezone(self._tz) if self._tz else r.marked_at
            writer.writerow([r.class_name, local.strftime("%Y-%m-%d"), local.strftime("%H:%M:%S")])
        return out.getvalue()
