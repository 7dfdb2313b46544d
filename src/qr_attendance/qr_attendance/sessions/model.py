from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from ..common.datetime_utils import from_millis, to_millis
from ..common.row_schema import req_datetime, req_int, req_str
from ..core.constants import QR_VALIDITY_MILLIS


@dataclass(frozen=True)
class ClassSession:
    """A freshly issued QR code: `token` is what gets encoded in the image."""

    class_id: int
    issued_at_millis: int

    @property
    def token(self) -> str:
        return f"{self.class_id}_{self.issued_at_millis}"

    @property
    def expires_at_millis(self) -> int:
        return self.issued_at_millis + QR_VALIDITY_MILLIS

    @property
    def expires_at(self) -> datetime:
        return from_millis(self.expires_at_millis)

    def is_valid_at(self, check_millis: int) -> bool:
        return check_millis < self.expires_at_millis


@dataclass(frozen=True)
class QrSession:
    """Persisted attendance window (`qr_sessions` table)."""

    session_id: int
    class_id: int
    teacher_id: int
    token: str
    expires_at: datetime

    def is_valid_at(self, now: datetime) -> bool:
        """Valid strictly before the stored expiry."""
        return to_millis(now) < to_millis(self.expires_at)

    def seconds_left(self, now: datetime) -> int:
        remaining = to_millis(self.expires_at) - to_millis(now)
        if remaining <= 0:
            return 0
        return -(-remaining // 1000)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "QrSession":
        return cls(
            session_id=req_int(row, "session_id", "qr_sessions"),
            class_id=req_int(row, "class_id", "qr_sessions"),
            teacher_id=req_int(row, "teacher_id", "qr_sessions"),
            token=req_str(row, "qr_data", "qr_sessions"),
            expires_at=req_datetime(row, "expires_at", "qr_sessions"),
        )
