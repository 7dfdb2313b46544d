from __future__ import annotations

import logging
from datetime import date

from flask import Flask, flash, jsonify, render_template, request

from ..common.datetime_utils import parse_iso_date
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    DuplicateAttendanceError,
    QrVerificationError,
    ScanDecodeError,
    ValidationError,
)

logger = logging.getLogger(__name__)

GENERIC_SCAN_FAILURE = "Failed to mark attendance"


def _scan_error(e: QrVerificationError):
    status = 409 if isinstance(e, DuplicateAttendanceError) else 400
    return jsonify({"success": False, "code": e.code, "message": str(e)}), status


def register(app: Flask, container: Container) -> None:
    provider = container.session_provider

    def _scan(run):
        try:
            record = run()
        except QrVerificationError as e:
            return _scan_error(e)
        except ScanDecodeError as e:
            return jsonify({"success": False, "code": "no-qr-found", "message": str(e)}), 400
        except AuthorizationError as e:
            return jsonify({"success": False, "code": "forbidden", "message": str(e)}), 403
        except Exception:
            logger.exception("Unexpected error while marking attendance")
            return jsonify({"success": False, "code": "error", "message": GENERIC_SCAN_FAILURE}), 500

        return jsonify(
            {
                "success": True,
                "message": "Attendance marked successfully!",
                "class_id": record.class_id,
                "marked_at": record.marked_at.isoformat(),
            }
        ), 201

    @app.route("/student", endpoint="student_portal")
    @provider.role_required(Role.STUDENT)
    def student_portal():
        return render_template("student/portal.html", active_page="student_portal")

    @app.route("/api/attendance/scan", methods=["POST"], endpoint="api_scan")
    @provider.role_required(Role.STUDENT)
    def api_scan():
        data = request.get_json(silent=True) or {}
        token = str(data.get("token") or "")
        user = provider.current_user()
        return _scan(
            lambda: container.attendance_service.mark_from_token(
                current_role=user.role,
                student_id=user.user_id,
                token=token,
            )
        )

    @app.route("/api/attendance/scan/image", methods=["POST"], endpoint="api_scan_image")
    @provider.role_required(Role.STUDENT)
    def api_scan_image():
        if "image" not in request.files:
            return jsonify({"success": False, "code": "validation", "message": "Missing image file"}), 400

        file = request.files["image"]
        user = provider.current_user()
        return _scan(
            lambda: container.attendance_service.mark_from_image(
                current_role=user.role,
                student_id=user.user_id,
                image=file.stream,
            )
        )

    def _history_filters():
        class_s = request.args.get("class_id") or "all"
        from_s = request.args.get("from") or ""
        to_s = request.args.get("to") or ""

        class_id = None if class_s == "all" else int(class_s)
        date_from: date | None = parse_iso_date(from_s) if from_s else None
        date_to: date | None = parse_iso_date(to_s) if to_s else None
        return class_id, date_from, date_to

    def _load_history():
        user = provider.current_user()
        try:
            class_id, date_from, date_to = _history_filters()
        except ValueError:
            raise ValidationError("Invalid filter values")
        rows = container.attendance_service.history(
            student_id=user.user_id,
            class_id=class_id,
            date_from=date_from,
            date_to=date_to,
        )
        return rows, class_id, date_from, date_to

    @app.route("/student/history", endpoint="student_history")
    @provider.role_required(Role.STUDENT)
    def student_history():
        rows, class_id, date_from, date_to = [], None, None, None
        try:
            rows, class_id, date_from, date_to = _load_history()
        except ValidationError as e:
            flash(str(e), "warning")
        except Exception:
            logger.exception("Failed to fetch attendance history")
            flash("Failed to fetch attendance records", "danger")

        try:
            classes = container.classes_repo.list_all()
        except Exception:
            logger.exception("Failed to fetch classes")
            classes = []

        return render_template(
            "student/history.html",
            rows=rows,
            classes=classes,
            selected_class=class_id,
            date_from=date_from.isoformat() if date_from else "",
            date_to=date_to.isoformat() if date_to else "",
            active_page="student_history",
        )

    @app.route("/student/history.csv", endpoint="student_history_csv")
    @provider.role_required(Role.STUDENT)
    def student_history_csv():
        try:
            rows, *_ = _load_history()
        except ValidationError as e:
            return jsonify({"success": False, "code": "validation", "message": str(e)}), 400
        except Exception:
            logger.exception("Failed to export attendance history")
            return jsonify({"success": False, "code": "error", "message": "Failed to fetch attendance records"}), 500

        body = container.report_service.history_csv(rows)
        filename = f"attendance-history-{container.report_service.today().isoformat()}.csv"
        return app.response_class(
            body.encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
