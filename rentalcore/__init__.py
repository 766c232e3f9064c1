# rentalcore/__init__.py
from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Any, Optional

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from .extensions import db, jwt, mail, migrate


# --- Config ------------------------------------------------------------------
def _get_allowed_origins() -> list[str]:
    """Allowed CORS origins from env, plus local dev servers."""
    default = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ]
    extra = os.getenv("CORS_ALLOWED_ORIGINS", "")
    extra_list = [o.strip() for o in extra.split(",") if o.strip()]
    return sorted(set(default + extra_list))


def _configure_logging(app: Flask) -> None:
    """JSON logs to stdout."""
    level = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    app.logger.setLevel(level)
    root = logging.getLogger()
    root.setLevel(level)

    # avoid duplicate handlers in reloaders
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt='{"ts":"%(asctime)s","level":"%(levelname)s","msg":"%(message)s","name":"%(name)s"}',
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)


def _configure_cors(app: Flask) -> None:
    CORS(
        app,
        resources={r"/api/*": {"origins": _get_allowed_origins()}},
        supports_credentials=True,
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
        max_age=86400,
    )


def _configure_proxy(app: Flask) -> None:
    """Respect X-Forwarded-* from the load balancer."""
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)  # type: ignore


def _init_extensions(app: Flask) -> None:
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    mail.init_app(app)


def _register_blueprints(app: Flask) -> None:
    """Register all API blueprints under /api."""
    from .routes import applications_bp, properties_bp, tenants_bp

    prefix = app.config["API_PREFIX"]
    for bp in (applications_bp, properties_bp, tenants_bp):
        app.register_blueprint(bp, url_prefix=prefix)
        app.logger.info("Registered blueprint %s at %s", bp.name, prefix)


def _register_cli(app: Flask) -> None:
    from .cli import occupancy_cli

    app.cli.add_command(occupancy_cli)


# --- Application Factory ------------------------------------------------------
def create_app(config_object: Optional[str | Any] = None) -> Flask:
    """
    Standard Flask application factory.

    `config_object` may be:
      - a config object
      - dotted path to a config class (e.g., "rentalcore.config.TestingConfig")
      - None (then we'll try CONFIG_CLASS env or default to rentalcore.config.Config)
    """
    app = Flask(__name__, instance_relative_config=True)

    if config_object is None:
        config_object = os.getenv("CONFIG_CLASS", "rentalcore.config.Config")
    app.config.from_object(config_object)

    # Ensure API url prefix setting exists for other modules if they need it
    app.config.setdefault("API_PREFIX", "/api")

    # Core middleware/logging/CORS
    _configure_logging(app)
    _configure_proxy(app)
    _configure_cors(app)

    # Init extensions, errors & blueprints
    from .errors import register_error_handlers

    _init_extensions(app)
    register_error_handlers(app)
    _register_blueprints(app)
    _register_cli(app)

    # Import models so metadata is complete for create_all / migrations
    from . import models  # noqa: F401

    @app.get(app.config["API_PREFIX"] + "/health")
    def health():
        return jsonify(
            {
                "status": "ok",
                "time": datetime.utcnow().isoformat() + "Z",
                "service": "rentalcore",
            }
        ), 200

    return app
