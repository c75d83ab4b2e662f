"""Database and extension wiring for the Flask app."""

from __future__ import annotations

from flask import Flask, current_app

from .config import BaseConfig
from .context import AppContext, create_app_context

EXTENSION_KEY = "streakmaster"


def init_db(app: Flask) -> AppContext:
    """Build the application context from the app's config and attach it."""

    config: BaseConfig = app.config["STREAKMASTER_CONFIG"]
    ctx = create_app_context(config)
    app.extensions[EXTENSION_KEY] = ctx
    return ctx


def get_context(app: Flask | None = None) -> AppContext:
    """Return the context attached to ``app`` (or the current app)."""

    target = app if app is not None else current_app
    try:
        return target.extensions[EXTENSION_KEY]
    except KeyError:  # pragma: no cover - misconfigured app
        raise RuntimeError("Database not initialized; call init_db(app) first") from None


__all__ = ["get_context", "init_db"]
