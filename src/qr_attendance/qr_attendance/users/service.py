from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from .repository import ProfileRepository, UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    email: str
    full_name: str
    role: Role
    roll_number: Optional[str] = None


class AuthService:
    """Use cases: sign up and sign in with email/password."""

    def __init__(self, users: UserRepository, profiles: ProfileRepository):
        self._users = users
        self._profiles = profiles

    def register(
        self,
        *,
        email: str,
        password: str,
        full_name: str,
        role: Role,
        roll_number: Optional[str] = None,
    ) -> int:
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        full_name = require_non_empty(full_name, "Full name")

        if role == Role.STUDENT:
            roll_number = require_non_empty(roll_number or "", "Roll number")
        else:
            roll_number = None

        # The repository raises DuplicateRegistrationError on the unique email key.
        user_id = self._users.create_user(
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            full_name=full_name,
            roll_number=roll_number,
        )
        logger.info("Registered %s account %s (user_id=%s)", role.value, email, user_id)
        return user_id

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        user = self._users.get_by_email(email)
        if not user:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder or corrupted hash values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        profile = self._profiles.get_by_user_id(user.user_id)
        if not profile:
            raise ValidationError("Profile not found for this account")

        return SessionUser(
            user_id=user.user_id,
            email=user.email,
            full_name=profile.full_name,
            role=user.role,
            roll_number=profile.roll_number,
        )
