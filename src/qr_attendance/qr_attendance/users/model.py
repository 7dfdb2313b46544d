from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..common.row_schema import opt_str, req_int, req_str
from ..core.enums import Role
from ..core.exceptions import RecordSchemaError


@dataclass(frozen=True)
class User:
    """Domain entity: an account that can sign in.

    Plain data object; no DB access code lives here.
    """

    user_id: int
    email: str
    password_hash: str
    role: Role

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "User":
        try:
            role = Role(row.get("role"))
        except ValueError as e:
            raise RecordSchemaError(f"users.role: unknown role {row.get('role')!r}") from e
        return cls(
            user_id=req_int(row, "user_id", "users"),
            email=req_str(row, "email", "users"),
            password_hash=req_str(row, "password_hash", "users"),
            role=role,
        )


@dataclass(frozen=True)
class Profile:
    """Display data of a user (`profiles` table)."""

    profile_id: int
    user_id: int
    full_name: str
    roll_number: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Profile":
        return cls(
            profile_id=req_int(row, "profile_id", "profiles"),
            user_id=req_int(row, "user_id", "profiles"),
            full_name=req_str(row, "full_name", "profiles"),
            roll_number=opt_str(row, "roll_number"),
        )
