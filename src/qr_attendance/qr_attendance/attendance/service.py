from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo
from typing import BinaryIO, Optional, Sequence

from ..common.datetime_utils import day_bounds_utc, now_utc
from ..core.constants import TEACHER_RECENT_LIMIT
from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    DuplicateAttendanceError,
    ExpiredTokenError,
    InvalidTokenError,
    ValidationError,
)
from ..sessions.qr_image import decode_qr_image
from ..sessions.repository import QrSessionRepository
from .model import AttendanceRecord, AttendanceView
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Scan verification (student side) and attendance history queries."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        sessions: QrSessionRepository,
        *,
        tz: Optional[tzinfo] = None,
    ):
        self._attendance = attendance
        self._sessions = sessions
        self._tz = tz

    def mark_from_token(
        self,
        *,
        current_role: Role,
        student_id: int,
        token: str,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        if current_role != Role.STUDENT:
            raise AuthorizationError("Only students can mark attendance")

        token = (token or "").strip()
        session = self._sessions.get_by_token(token) if token else None
        if not session:
            logger.info("Rejected scan by student %s: unknown token %r", student_id, token)
            raise InvalidTokenError("Invalid or expired QR code")

        # The stored expiry is authoritative; the client countdown is not consulted.
        now = now or now_utc()
        if not session.is_valid_at(now):
            logger.info("Rejected scan by student %s: token %s expired at %s", student_id, token, session.expires_at)
            raise ExpiredTokenError("QR code has expired")

        try:
            attendance_id = self._attendance.create(
                student_id=int(student_id),
                qr_session_id=session.session_id,
                class_id=session.class_id,
                marked_at=now,
            )
        except DuplicateAttendanceError:
            logger.info("Student %s already marked for session %s", student_id, session.session_id)
            raise

        logger.info("Attendance marked: student=%s session=%s class=%s", student_id, session.session_id, session.class_id)
        return AttendanceRecord(
            attendance_id=attendance_id,
            student_id=int(student_id),
            class_id=session.class_id,
            qr_session_id=session.session_id,
            marked_at=now,
        )

    def mark_from_image(
        self,
        *,
        current_role: Role,
        student_id: int,
        image: BinaryIO,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        if current_role != Role.STUDENT:
            raise AuthorizationError("Only students can mark attendance")

        token = decode_qr_image(image)
        return self.mark_from_token(current_role=current_role, student_id=student_id, token=token, now=now)

    def history(
        self,
        *,
        student_id: int,
        class_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Sequence[AttendanceView]:
        if date_from and date_to and date_from > date_to:
            raise ValidationError("Start date must be on or before end date")

        marked_from, marked_before = day_bounds_utc(date_from, date_to, self._tz)
        return self._attendance.list_for_student(
            student_id=int(student_id),
            class_id=int(class_id) if class_id else None,
            marked_from=marked_from,
            marked_before=marked_before,
        )

    def recent(self, *, limit: int = TEACHER_RECENT_LIMIT) -> Sequence[AttendanceView]:
        return self._attendance.list_recent(limit=int(limit))
