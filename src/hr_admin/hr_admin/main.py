from __future__ import annotations

import importlib
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .biometric.controller import register as register_biometric
from .common.http import register_actor_loader, register_error_handlers
from .container import Container, build_container
from .database.bootstrap import SCHEMA_PATH, apply_schema, ensure_demo_data, list_tables
from .database.connection import DBConfig
from .leave_banks.controller import register as register_leave_banks
from .offsets.controller import register as register_offsets
from .users.controller import register as register_users
from .workflow.controller import register as register_workflow

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def _configure_logging(app: Flask, settings) -> None:
    level = getattr(logging, str(getattr(settings, "LOG_LEVEL", "INFO")).upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)

    log_dir = getattr(settings, "LOG_DIR", "")
    # create_app may run several times in one process (tests, reloader).
    if log_dir and not any(getattr(h, "_hr_admin", False) for h in root.handlers):
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, "hr_admin.log"), maxBytes=10485760, backupCount=5
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        file_handler.setLevel(level)
        file_handler._hr_admin = True
        root.addHandler(file_handler)

    if app.config["DEBUG"] and not any(getattr(h, "_hr_admin_console", False) for h in root.handlers):
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(LOG_FORMAT))
        console._hr_admin_console = True
        root.addHandler(console)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    _configure_logging(app, settings)
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
    )

    if container is None:
        config = DBConfig.from_mapping(db_config)
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(config, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_data(config)
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            biometric_timeout=int(getattr(settings, "BIOMETRIC_TIMEOUT", 5)),
            export_row_limit=int(getattr(settings, "EXPORT_ROW_LIMIT", 5000)),
        )

    app.extensions["hr_admin.container"] = container

    register_error_handlers(app)
    register_actor_loader(app, container)
    register_users(app, container)
    register_offsets(app, container)
    register_leave_banks(app, container)
    register_workflow(app, container)
    register_biometric(app, container)

    return app
