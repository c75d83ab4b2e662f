"""Streakmaster application factory."""

from __future__ import annotations

import atexit
from importlib import import_module
from typing import Iterable

from flask import Flask

from . import cli as _cli
from .config import BaseConfig, DevConfig, TestConfig, resolve_config
from .errors import register_error_handlers
from .logging_config import get_logger, setup_logging

logger = get_logger("app")


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths registered on the app."""

    yield "streakmaster.blueprints.habits"
    yield "streakmaster.blueprints.profiles"
    yield "streakmaster.blueprints.categories"
    yield "streakmaster.blueprints.admin"


def create_app(config_name: str | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__, instance_relative_config=True)
    config_cls = resolve_config(config_name or app.config.get("ENV"))
    config_obj = config_cls()
    app.config.from_object(config_obj)
    app.config["STREAKMASTER_CONFIG"] = config_obj

    setup_logging(config_obj)
    _register_blueprints(app)
    register_error_handlers(app)

    # Import init_db lazily so importing the package does not build an engine.
    from .extensions import init_db

    ctx = init_db(app)
    _cli.init_app(app)

    if config_obj.SCHEDULER_ENABLED:
        from .scheduler import create_scheduler

        scheduler = create_scheduler(ctx, auto_start=True)
        app.extensions["streakmaster_scheduler"] = scheduler
        # Shut the job thread down with the interpreter.
        atexit.register(scheduler.stop)

    logger.info("Application created", extra={"config": config_cls.__name__})
    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


__all__ = ["BaseConfig", "DevConfig", "TestConfig", "create_app"]
