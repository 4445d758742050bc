from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from mysql.connector import Error as MySQLError

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.exceptions import ConflictError, DomainError, NotFoundError, StateError, ValidationError
from .corrections.controller import register as register_corrections
from .database.bootstrap import apply_schema, list_tables
from .leave.controller import register as register_leave
from .overtime.controller import register as register_overtime
from .payroll.controller import register as register_payroll

logger = logging.getLogger(__name__)

_OPTION_KEYS = (
    "UPLOAD_DIR",
    "MAX_SELFIE_BYTES",
    "OVERTIME_LEAVE_RULE",
    "DEFAULT_OVERTIME_TO_LEAVE_RATIO",
    "LEAVE_CLAMP_INSUFFICIENT",
    "MORNING_START",
    "MORNING_END",
    "AFTERNOON_START",
    "LATE_GRACE_MINUTES",
)


def status_for(exc: DomainError) -> int:
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, (StateError, ConflictError)):
        return 409
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        return jsonify({"success": False, "error": type(exc).__name__, "message": str(exc)}), status_for(exc)

    @app.errorhandler(MySQLError)
    def handle_storage_error(exc: MySQLError):
        logger.exception("storage error")
        return jsonify({"success": False, "error": "StorageError", "message": "Database error"}), 500


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        options = {key: getattr(settings, key) for key in _OPTION_KEYS if hasattr(settings, key)}
        container = build_container(db_config=db_config, options=options)

    app.extensions["timekeeping"] = container
    register_error_handlers(app)

    register_attendance(app, container)
    register_overtime(app, container)
    register_corrections(app, container)
    register_leave(app, container)
    register_payroll(app, container)

    return app
