from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.row_schema import opt_str, req_datetime, req_int, req_str


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student present in one QR session."""

    attendance_id: int
    student_id: int
    class_id: int
    qr_session_id: int
    marked_at: datetime


@dataclass(frozen=True)
class AttendanceView:
    """Read-model for history pages, reports and exports (joined with class/profile)."""

    attendance_id: int
    student_id: int
    class_id: int
    class_name: str
    qr_session_id: int
    marked_at: datetime
    student_name: Optional[str] = None
    roll_number: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "AttendanceView":
        return cls(
            attendance_id=req_int(row, "attendance_id", "attendance"),
            student_id=req_int(row, "student_id", "attendance"),
            class_id=req_int(row, "class_id", "attendance"),
            class_name=req_str(row, "class_name", "attendance"),
            qr_session_id=req_int(row, "qr_session_id", "attendance"),
            marked_at=req_datetime(row, "marked_at", "attendance"),
            student_name=opt_str(row, "full_name"),
            roll_number=opt_str(row, "roll_number"),
        )
