"""Process-wide session provider.

Every controller asks this object who is signed in instead of poking at the
Flask session directly. Listeners can subscribe to sign-in/sign-out changes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Optional

from flask import flash, jsonify, redirect, render_template, request, session, url_for

from ..core.enums import Role
from .service import SessionUser

logger = logging.getLogger(__name__)

_SESSION_KEY = "auth_user"


@dataclass(frozen=True)
class AuthEvent:
    kind: str  # "signed_in" | "signed_out"
    user: Optional[SessionUser]


Listener = Callable[[AuthEvent], None]


def _wants_json() -> bool:
    return request.path.startswith("/api/")


class SessionProvider:
    def __init__(self):
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: AuthEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Auth listener failed for %s", event.kind)

    def current_user(self) -> Optional[SessionUser]:
        data = session.get(_SESSION_KEY)
        if not data:
            return None
        try:
            return SessionUser(
                user_id=int(data["user_id"]),
                email=data["email"],
                full_name=data["full_name"],
                role=Role(data["role"]),
                roll_number=data.get("roll_number"),
            )
        except (KeyError, TypeError, ValueError):
            logger.warning("Dropping malformed auth session")
            session.pop(_SESSION_KEY, None)
            return None

    def current_role(self) -> Optional[Role]:
        user = self.current_user()
        return user.role if user else None

    def sign_in(self, user: SessionUser) -> None:
        session.clear()
        session[_SESSION_KEY] = {
            "user_id": user.user_id,
            "email": user.email,
            "full_name": user.full_name,
            "role": user.role.value,
            "roll_number": user.roll_number,
        }
        self._notify(AuthEvent("signed_in", user))

    def sign_out(self) -> None:
        user = self.current_user()
        session.clear()
        self._notify(AuthEvent("signed_out", user))

    def login_required(self, view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if self.current_user() is None:
                if _wants_json():
                    return jsonify({"success": False, "code": "unauthenticated", "message": "Please sign in"}), 401
                flash("Please sign in to continue", "warning")
                return redirect(url_for("auth"))
            return view(*args, **kwargs)

        return wrapper

    def role_required(self, role: Role):
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                user = self.current_user()
                if user is None:
                    if _wants_json():
                        return jsonify({"success": False, "code": "unauthenticated", "message": "Please sign in"}), 401
                    return redirect(url_for("auth"))

                if user.role != role:
                    if _wants_json():
                        return jsonify({"success": False, "code": "forbidden", "message": "Not allowed"}), 403
                    return render_template("403.html", current_user=user), 403

                return view(*args, **kwargs)

            return wrapper

        return decorator
