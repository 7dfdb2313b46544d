from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for access control."""

    TEACHER = "teacher"
    STUDENT = "student"
