from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .container import Container, build_container
from .core.constants import DEFAULT_FACE_MATCH_MIN_SCORE, DEFAULT_TIMEZONE
from .core.exceptions import DomainError
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import apply_schema, list_tables, seed_defaults
from .employees.controller import register as register_employees
from .faces.controller import register as register_faces
from .leaves.controller import register as register_leaves
from .outlets.controller import register as register_outlets
from .payroll.controller import register as register_payroll
from .settings.controller import register as register_settings

logger = logging.getLogger(__name__)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify(e.payload()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"success": False, "error": e.name, "message": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error")
        return jsonify({"success": False, "error": "InternalError", "message": "Internal server error"}), 500


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.sort_keys = False

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

        schema_path = Path(__file__).resolve().parents[2] / "database" / "schema.sql"
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            seed_defaults(db_config)

        container = build_container(
            db_config=db_config,
            admin_username=getattr(settings, "ADMIN_USERNAME"),
            admin_password_hash=getattr(settings, "ADMIN_PASSWORD_HASH"),
            timezone=getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE),
            face_min_score=int(getattr(settings, "FACE_MATCH_MIN_SCORE", DEFAULT_FACE_MATCH_MIN_SCORE)),
        )

    _register_error_handlers(app)

    register_auth(app, container)
    register_settings(app, container)
    register_employees(app, container)
    register_outlets(app, container)
    register_attendance(app, container)
    register_faces(app, container)
    register_payroll(app, container)
    register_leaves(app, container)
    register_dashboard(app, container)

    return app
