from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .cascade.controller import register as register_cascade
from .container import build_container
from .logging_setup import configure_logging

logger = logging.getLogger(__name__)


def create_app(settings_module: str | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logger.info(
        "settings=%s backend=%s max_depth=%s",
        settings_module,
        getattr(settings, "RECORD_BACKEND", "mysql"),
        getattr(settings, "CASCADE_MAX_DEPTH", None),
    )

    container = build_container(settings)
    register_cascade(app, container)

    return app
