"""Categories blueprint package."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("categories", __name__, url_prefix="/users/<int:user_id>/categories")

from . import routes  # noqa: E402,F401 - import routes for registration

__all__ = ["bp"]
