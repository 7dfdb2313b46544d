from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceView


class AttendanceRepository(Protocol):
    def create(self, *, student_id: int, qr_session_id: int, class_id: int, marked_at: datetime) -> int:
        """Insert one record; returns attendance_id.

        Raises DuplicateAttendanceError when (student_id, qr_session_id) already exists.
        """

        raise NotImplementedError

    def list_for_student(
        self,
        *,
        student_id: int,
        class_id: Optional[int] = None,
        marked_from: Optional[datetime] = None,
        marked_before: Optional[datetime] = None,
    ) -> Sequence[AttendanceView]:
        """Newest first. `marked_from` inclusive, `marked_before` exclusive."""

        raise NotImplementedError

    def list_recent(self, *, limit: int) -> Sequence[AttendanceView]:
        raise NotImplementedError
