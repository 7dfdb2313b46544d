from __future__ import annotations

import logging

from flask import Flask, jsonify, render_template, request, url_for

from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, InvalidTokenError, SessionIssueError, ValidationError
from .qr_image import render_qr_png

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    provider = container.session_provider

    @app.route("/teacher", endpoint="teacher_portal")
    @provider.role_required(Role.TEACHER)
    def teacher_portal():
        try:
            classes = container.classes_repo.list_all()
            recent = container.attendance_service.recent()
        except Exception:
            logger.exception("Failed to load teacher portal data")
            classes, recent = [], []
        return render_template(
            "teacher/portal.html",
            classes=classes,
            attendance=recent,
            validity_seconds=container.session_issuer.validity_seconds,
            active_page="teacher_portal",
        )

    @app.route("/api/sessions", methods=["POST"], endpoint="api_issue_session")
    @provider.role_required(Role.TEACHER)
    def api_issue_session():
        data = request.get_json(silent=True) or {}
        user = provider.current_user()
        try:
            class_id = int(data.get("class_id") or 0) or None
        except (TypeError, ValueError):
            return jsonify({"success": False, "code": "validation", "message": "Please select a class"}), 400

        try:
            issued = container.session_issuer.issue(
                current_role=user.role,
                class_id=class_id,
                teacher_id=user.user_id,
            )
        except ValidationError as e:
            return jsonify({"success": False, "code": "validation", "message": str(e)}), 400
        except AuthorizationError as e:
            return jsonify({"success": False, "code": "forbidden", "message": str(e)}), 403
        except SessionIssueError as e:
            return jsonify({"success": False, "code": "issue-failed", "message": str(e)}), 500
        except Exception:
            logger.exception("Unexpected error while issuing QR session")
            return jsonify({"success": False, "code": "issue-failed", "message": "Failed to generate QR code"}), 500

        return jsonify(
            {
                "success": True,
                "token": issued.token,
                "expires_at": issued.expires_at.isoformat(),
                "expires_in": container.session_issuer.validity_seconds,
                "qr_url": url_for("session_qr_image", token=issued.token),
            }
        ), 201

    @app.route("/sessions/<token>/qr.png", endpoint="session_qr_image")
    @provider.role_required(Role.TEACHER)
    def session_qr_image(token: str):
        png = render_qr_png(token)
        return app.response_class(png, mimetype="image/png", headers={"Cache-Control": "no-store"})

    @app.route("/api/sessions/<token>/status", endpoint="api_session_status")
    @provider.login_required
    def api_session_status(token: str):
        try:
            seconds_left = container.session_issuer.seconds_left(token)
        except InvalidTokenError as e:
            return jsonify({"success": False, "code": e.code, "message": str(e)}), 404
        except Exception:
            logger.exception("Failed to read QR session status")
            return jsonify({"success": False, "code": "error", "message": "Failed to read QR status"}), 500

        return jsonify({"success": True, "seconds_left": seconds_left, "expired": seconds_left == 0})
