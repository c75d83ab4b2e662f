"""Admin routes."""

from __future__ import annotations

from flask import jsonify

from ...extensions import get_context
from . import bp


@bp.post("/recompute-streaks")
def recompute_streaks():
    """Run the batch streak recomputation now and return its summary."""

    summary = get_context().recompute_streaks()
    return jsonify(summary.to_dict())
