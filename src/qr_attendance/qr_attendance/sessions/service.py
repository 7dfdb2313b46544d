from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..classes.repository import ClassRepository
from ..common.datetime_utils import now_utc, to_millis
from ..core.constants import QR_VALIDITY_MILLIS
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, InvalidTokenError, SessionIssueError, ValidationError
from .model import ClassSession
from .repository import QrSessionRepository

logger = logging.getLogger(__name__)


class SessionIssuer:
    """Use case: a teacher opens a short attendance window for a class."""

    def __init__(self, sessions: QrSessionRepository, classes: ClassRepository):
        self._sessions = sessions
        self._classes = classes

    @property
    def validity_seconds(self) -> int:
        return QR_VALIDITY_MILLIS // 1000

    def issue(
        self,
        *,
        current_role: Role,
        class_id: Optional[int],
        teacher_id: int,
        now: datetime | None = None,
    ) -> ClassSession:
        if current_role != Role.TEACHER:
            raise AuthorizationError("Only teachers can generate QR codes")

        if not class_id:
            raise ValidationError("Please select a class")

        if not self._classes.get_by_id(int(class_id)):
            raise ValidationError("Class does not exist")

        now = now or now_utc()
        issued = ClassSession(
            class_id=int(class_id),
            issued_at_millis=to_millis(now),
        )

        # Nothing is shown to the teacher unless the session is stored first.
        try:
            self._sessions.create(
                class_id=issued.class_id,
                teacher_id=int(teacher_id),
                token=issued.token,
                expires_at=issued.expires_at,
            )
        except Exception as e:
            logger.exception("Failed to persist QR session for class %s", class_id)
            raise SessionIssueError("Failed to generate QR code") from e

        logger.info("Issued QR session %s (teacher=%s, expires=%s)", issued.token, teacher_id, issued.expires_at)
        return issued

    def seconds_left(self, token: str, *, now: datetime | None = None) -> int:
        """Server-side remaining validity of a stored token."""
        session = self._sessions.get_by_token((token or "").strip())
        if not session:
            raise InvalidTokenError("Invalid or expired QR code")
        return session.seconds_left(now or now_utc())
