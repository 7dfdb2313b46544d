from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    provider = container.session_provider

    @app.route("/", endpoint="index")
    @provider.login_required
    def index():
        return render_template("index.html", active_page="index")

    @app.route("/auth", methods=["GET", "POST"], endpoint="auth")
    def auth():
        if provider.current_user() is not None:
            return redirect(url_for("index"))

        if request.method == "POST":
            email = request.form.get("email", "")
            password = request.form.get("password", "")
            try:
                s_user = container.auth_service.authenticate(email, password)
                provider.sign_in(s_user)
                flash("Signed in successfully!", "success")
                return redirect(url_for("index"))
            except (AuthenticationError, ValidationError) as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Sign-in failed")
                flash("Sign in failed", "danger")

        return render_template("auth.html", tab="signin")

    @app.route("/auth/register", methods=["POST"], endpoint="register")
    def register_account():
        try:
            try:
                role = Role(request.form.get("role", Role.STUDENT.value))
            except ValueError:
                raise ValidationError("Invalid account type")

            container.auth_service.register(
                email=request.form.get("email", ""),
                password=request.form.get("password", ""),
                full_name=request.form.get("full_name", ""),
                role=role,
                roll_number=request.form.get("roll_number", ""),
            )
            flash("Account created successfully! Please sign in.", "success")
            return redirect(url_for("auth"))
        except (AuthenticationError, ValidationError) as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Sign-up failed")
            flash("Sign up failed", "danger")

        return render_template("auth.html", tab="signup"), 400

    @app.route("/logout", endpoint="logout")
    def logout():
        provider.sign_out()
        flash("Logged out successfully", "info")
        return redirect(url_for("auth"))
