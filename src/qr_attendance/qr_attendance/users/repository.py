from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import Role
from .model import Profile, User


class UserRepository(Protocol):
    """Repository interface for accounts.

    Services depend on this protocol, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        role: Role,
        full_name: str,
        roll_number: Optional[str],
    ) -> int:
        """Create the account and its profile together; returns user_id.

        Raises DuplicateRegistrationError when the email is taken.
        """

        raise NotImplementedError


class ProfileRepository(Protocol):
    def get_by_user_id(self, user_id: int) -> Optional[Profile]:
        raise NotImplementedError
