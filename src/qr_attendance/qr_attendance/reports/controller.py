from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, url_for

from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    provider = container.session_provider

    @app.route("/teacher/students/<int:student_id>", endpoint="student_profile")
    @provider.role_required(Role.TEACHER)
    def student_profile(student_id: int):
        try:
            report = container.report_service.student_profile(student_id=student_id)
        except ValidationError as e:
            flash(str(e), "warning")
            return redirect(url_for("teacher_portal"))
        except Exception:
            logger.exception("Failed to build profile for student %s", student_id)
            flash("Failed to load student profile", "danger")
            return redirect(url_for("teacher_portal"))

        return render_template(
            "teacher/student_profile.html",
            profile=report.profile,
            records=report.records,
            stats=report.stats,
            active_page="teacher_portal",
        )
