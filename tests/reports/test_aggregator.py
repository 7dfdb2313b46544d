from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone

from src.qr_attendance.qr_attendance.reports.aggregator import (
    class_stats,
    current_streak,
    monthly_trend,
    summarize,
)


@dataclass(frozen=True)
class Rec:
    class_id: int
    class_name: str
    qr_session_id: int
    marked_at: datetime


def _at(y, m, d, hour=9):
    return datetime(y, m, d, hour, tzinfo=timezone.utc)


def test_class_percentage_uses_sessions_the_student_engaged_with():
    records = [
        Rec(1, "Math", 1, _at(2026, 10, 1)),
        Rec(1, "Math", 2, _at(2026, 10, 2)),
        Rec(2, "Physics", 3, _at(2026, 10, 3)),
    ]

    stats = {s.class_name: s for s in class_stats(records)}

    assert stats["Math"].total_sessions == 2
    assert stats["Math"].present_count == 2
    assert stats["Math"].percentage == 100.0
    assert stats["Physics"].total_sessions == 1


def test_class_stats_keep_first_seen_order():
    records = [
        Rec(2, "Physics", 3, _at(2026, 10, 3)),
        Rec(1, "Math", 1, _at(2026, 10, 1)),
        Rec(2, "Physics", 4, _at(2026, 10, 4)),
    ]

    assert [s.class_name for s in class_stats(records)] == ["Physics", "Math"]


def test_streak_stops_at_first_gap():
    today = date(2026, 10, 19)
    marked = [date(2026, 10, 19), date(2026, 10, 18), date(2026, 10, 16)]

    assert current_streak(marked, today) == 2


def test_streak_is_zero_without_a_mark_today():
    today = date(2026, 10, 19)

    assert current_streak([date(2026, 10, 18), date(2026, 10, 17)], today) == 0
    assert current_streak([], today) == 0


def test_streak_counts_a_day_once():
    today = date(2026, 10, 19)

    assert current_streak([today, today, date(2026, 10, 18)], today) == 2


def test_monthly_trend_has_six_zero_filled_months_oldest_first():
    today = date(2026, 10, 19)
    marked = [date(2026, 10, 1), date(2026, 10, 2), date(2026, 7, 15), date(2026, 3, 31)]

    trend = monthly_trend(marked, today)

    assert [(t.year, t.month) for t in trend] == [
        (2026, 5), (2026, 6), (2026, 7), (2026, 8), (2026, 9), (2026, 10),
    ]
    assert [t.count for t in trend] == [0, 0, 1, 0, 0, 2]
    assert sum(t.count for t in trend) == 3
    assert trend[-1].label == "Oct 2026"


def test_monthly_trend_crosses_year_boundary():
    trend = monthly_trend([date(2025, 11, 30), date(2026, 2, 1)], date(2026, 2, 10))

    assert [(t.year, t.month) for t in trend] == [
        (2025, 9), (2025, 10), (2025, 11), (2025, 12), (2026, 1), (2026, 2),
    ]
    assert [t.count for t in trend] == [0, 0, 1, 0, 0, 1]


def test_summarize_overall_numbers():
    today = date(2026, 10, 19)
    records = [
        Rec(1, "Math", 1, _at(2026, 10, 19)),
        Rec(1, "Math", 2, _at(2026, 10, 18)),
        Rec(2, "Physics", 3, _at(2026, 10, 16)),
    ]

    stats = summarize(records, today=today)

    assert stats.overall.total_sessions == 3
    assert stats.overall.total_present == 3
    assert stats.overall.attendance_rate == 100.0
    assert stats.overall.current_streak == 2
    assert len(stats.monthly_trends) == 6


def test_summarize_without_records():
    stats = summarize([], today=date(2026, 10, 19))

    assert stats.overall.attendance_rate == 0.0
    assert stats.overall.current_streak == 0
    assert stats.classes == []
    assert [t.count for t in stats.monthly_trends] == [0] * 6


def test_same_named_classes_stay_separate():
    records = [
        Rec(1, "Math", 1, _at(2026, 10, 1)),
        Rec(7, "Math", 2, _at(2026, 10, 2)),
        Rec(7, "Math", 3, _at(2026, 10, 3)),
    ]

    stats = class_stats(records)

    assert [(s.class_name, s.total_sessions, s.present_count) for s in stats] == [
        ("Math", 1, 1),
        ("Math", 2, 2),
    ]
