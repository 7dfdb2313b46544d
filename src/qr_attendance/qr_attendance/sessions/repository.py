from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import QrSession


class QrSessionRepository(Protocol):
    def create(self, *, class_id: int, teacher_id: int, token: str, expires_at: datetime) -> int:
        """Persist a session; returns session_id."""

        raise NotImplementedError

    def get_by_token(self, token: str) -> Optional[QrSession]:
        raise NotImplementedError
