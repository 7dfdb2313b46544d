"""Attendance aggregation for one student.

Everything here is a pure function over already-fetched rows; results are
recomputed on every page load.

Note: a class's denominator is the number of *distinct sessions the student
has a record for*, not the number of sessions the teacher held. With the
one-record-per-session rule this makes every class 100%. It matches the
current product behaviour and is kept on purpose until the metric is
redefined against `qr_sessions`.

Classes are keyed by `class_id`, not by display name, so two classes that
share a name are reported separately. Older clients grouped by name.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, Optional, Protocol, Sequence

from ..common.datetime_utils import local_date
from ..core.constants import MONTHLY_TREND_MONTHS


class MarkedRecord(Protocol):
    class_id: int
    class_name: str
    qr_session_id: int
    marked_at: datetime


@dataclass(frozen=True)
class ClassAttendanceStat:
    class_name: str
    total_sessions: int
    present_count: int

    @property
    def percentage(self) -> float:
        if not self.total_sessions:
            return 0.0
        return self.present_count / self.total_sessions * 100


@dataclass(frozen=True)
class MonthlyTrend:
    year: int
    month: int
    count: int

    @property
    def label(self) -> str:
        return date(self.year, self.month, 1).strftime("%b %Y")


@dataclass(frozen=True)
class OverallStats:
    total_sessions: int
    total_present: int
    attendance_rate: float
    current_streak: int


@dataclass(frozen=True)
class StudentStats:
    overall: OverallStats
    classes: list[ClassAttendanceStat]
    monthly_trends: list[MonthlyTrend]


def class_stats(records: Iterable[MarkedRecord]) -> list[ClassAttendanceStat]:
    """Per-class stats in first-seen order."""
    names: dict[int, str] = {}
    present: dict[int, int] = {}
    sessions: dict[int, set[int]] = {}

    for r in records:
        names.setdefault(r.class_id, r.class_name)
        present[r.class_id] = present.get(r.class_id, 0) + 1
        sessions.setdefault(r.class_id, set()).add(r.qr_session_id)

    return [
        ClassAttendanceStat(
            class_name=names[class_id],
            total_sessions=len(sessions[class_id]),
            present_count=present[class_id],
        )
        for class_id in names
    ]


def current_streak(marked_dates: Iterable[date], today: date) -> int:
    """Consecutive days with a mark, counting back from today."""
    days = set(marked_dates)
    streak = 0
    cursor = today
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def monthly_trend(
    marked_dates: Iterable[date],
    today: date,
    *,
    months: int = MONTHLY_TREND_MONTHS,
) -> list[MonthlyTrend]:
    """Counts per calendar month for the trailing window, oldest first, zero-filled."""
    buckets: dict[tuple[int, int], int] = {}
    for offset in range(months - 1, -1, -1):
        buckets[_shift_month(today.year, today.month, -offset)] = 0

    for d in marked_dates:
        key = (d.year, d.month)
        if key in buckets:
            buckets[key] += 1

    return [MonthlyTrend(year=y, month=m, count=c) for (y, m), c in buckets.items()]


def summarize(
    records: Sequence[MarkedRecord],
    *,
    today: date,
    tz: Optional[tzinfo] = None,
) -> StudentStats:
    per_class = class_stats(records)
    total_sessions = sum(s.total_sessions for s in per_class)
    total_present = len(records)
    marked_dates = [local_date(r.marked_at, tz) for r in records]

    overall = OverallStats(
        total_sessions=total_sessions,
        total_present=total_present,
        attendance_rate=(total_present / total_sessions * 100) if total_sessions else 0.0,
        current_streak=current_streak(marked_dates, today),
    )
    return StudentStats(
        overall=overall,
        classes=per_class,
        monthly_trends=monthly_trend(marked_dates, today),
    )
