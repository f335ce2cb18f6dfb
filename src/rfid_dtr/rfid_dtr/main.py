from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from werkzeug.security import generate_password_hash

from config import get_settings_module, load_settings

from .database.bootstrap import apply_schema, apply_seed_sql, list_tables

from .common.web import json_error
from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .reports.controller import register as register_reports
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def resolve_admin_password_hash(settings) -> str:
    password_hash = getattr(settings, "ADMIN_PASSWORD_HASH", None)
    if password_hash:
        return password_hash
    return generate_password_hash(getattr(settings, "ADMIN_PASSWORD", ""))


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings = load_settings()
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            get_settings_module(),
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            logger.info("demo cards seeded")

        container = build_container(
            db_config=db_config,
            admin_username=getattr(settings, "ADMIN_USERNAME", "admin"),
            admin_password_hash=resolve_admin_password_hash(settings),
            write_attempts=int(getattr(settings, "STORE_WRITE_ATTEMPTS", 2)),
        )

    app.extensions["dtr_container"] = container

    @app.errorhandler(500)
    def internal_error(e):
        logger.error("Unhandled error: %s", getattr(e, "original_exception", e))
        return json_error("Internal server error. Please try again.", 500)

    register_users(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    return app
