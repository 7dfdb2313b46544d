from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..core.exceptions import DuplicateRegistrationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key
from .model import Profile, User
from .repository import ProfileRepository, UserRepository


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, email, password_hash, role
                FROM users
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            row = fetchone(cur)
            return User.from_row(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, email, password_hash, role
                FROM users
                WHERE email=%s
                """,
                (email,),
            )
            row = fetchone(cur)
            return User.from_row(row) if row else None

    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        role: Role,
        full_name: str,
        roll_number: Optional[str],
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO users(email, password_hash, role) VALUES(%s,%s,%s)",
                    (email, password_hash, role.value),
                )
                user_id = int(cur.lastrowid)
                cur.execute(
                    "INSERT INTO profiles(user_id, full_name, roll_number) VALUES(%s,%s,%s)",
                    (user_id, full_name, roll_number),
                )
                return user_id
        except Exception as e:
            if is_duplicate_key(e):
                raise DuplicateRegistrationError("This email is already registered") from e
            raise


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_user_id(self, user_id: int) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT profile_id, user_id, full_name, roll_number
                FROM profiles
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            row = fetchone(cur)
            return Profile.from_row(row) if row else None
