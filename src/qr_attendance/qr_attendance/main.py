from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.datetime_utils import as_utc
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .reports.controller import register as register_reports
from .sessions.controller import register as register_sessions
from .users.controller import register as register_users
from .users.session_provider import AuthEvent

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]",
    )


def _log_auth_event(event: AuthEvent) -> None:
    who = event.user.email if event.user else "anonymous"
    logger.info("Auth %s: %s", event.kind, who)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder=str(REPO_ROOT / "templates"), static_folder=str(REPO_ROOT / "static"))

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    tz = ZoneInfo(getattr(settings, "TIMEZONE", "UTC"))
    app.config["TIMEZONE"] = tz

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            ensure_demo_users(db_config)
            logger.info("Demo seed ready")

        container = build_container(db_config=db_config, tz=tz)

    container.session_provider.subscribe(_log_auth_event)

    @app.context_processor
    def inject_current_user():
        return {"current_user": container.session_provider.current_user()}

    @app.template_filter("localtime")
    def localtime(value, fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
        return as_utc(value).astimezone(tz).strftime(fmt)

    register_users(app, container)
    register_sessions(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    return app
