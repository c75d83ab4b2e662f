"""Habit routes."""

from __future__ import annotations

from datetime import date

from flask import jsonify, request

from ...exceptions import ProfileNotFoundError
from ...extensions import get_context
from ...services.overview import (
    SORT_ORDERS,
    habit_summary,
    recent_activity,
    sort_habits,
    stats_overview,
    weekly_chart,
)
from . import bp
from .forms import HabitForm, HabitUpdateForm, LogForm


def _payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _require_profile(user_id: int) -> None:
    if get_context().profile_repo.get_by_id(user_id) is None:
        raise ProfileNotFoundError(user_id)


@bp.get("/")
def list_habits(user_id: int):
    """List habits with streak, completion, recent history and overdue flag."""

    order = request.args.get("sort", "schedule")
    if order not in SORT_ORDERS:
        raise ValueError(f"Unknown sort order {order!r}; expected one of {', '.join(SORT_ORDERS)}")

    _require_profile(user_id)
    today = date.today()
    habits, logs_by_habit = get_context().habit_service.habits_with_logs(user_id)
    ordered = sort_habits(habits, logs_by_habit, today, order)
    return jsonify(
        {
            "sort": order,
            "habits": [
                habit_summary(habit, logs_by_habit.get(habit.id, []), today) for habit in ordered
            ],
        }
    )


@bp.post("/")
def create_habit(user_id: int):
    """Create a habit for the user."""

    form = HabitForm.model_validate(_payload())
    habit = get_context().habit_service.create_habit(
        user_id,
        name=form.name,
        frequency=form.frequency,
        start_date=form.start_date,
        weekdays=form.weekdays,
        end_date=form.end_date,
        category_id=form.category_id,
    )
    return jsonify(habit_summary(habit, [], date.today())), 201


@bp.patch("/<int:habit_id>")
def edit_habit(user_id: int, habit_id: int):
    """Apply a partial update to a habit."""

    form = HabitUpdateForm.model_validate(_payload())
    ctx = get_context()
    habit = ctx.habit_service.edit_habit(user_id, habit_id, **form.changes())
    logs = ctx.habit_repo.list_logs(habit_id, user_id=user_id)
    return jsonify(habit_summary(habit, logs, date.today()))


@bp.delete("/<int:habit_id>")
def delete_habit(user_id: int, habit_id: int):
    """Delete a habit and its logs."""

    total = get_context().habit_service.delete_habit(user_id, habit_id)
    return jsonify({"deleted": habit_id, "total_streak": total})


@bp.post("/<int:habit_id>/logs")
def log_habit(user_id: int, habit_id: int):
    """Record today's status for a habit."""

    form = LogForm.model_validate(_payload())
    outcome = get_context().habit_service.log_today(user_id, habit_id, form.status)
    return jsonify(outcome.to_dict()), 201


@bp.get("/stats")
def habit_stats(user_id: int):
    """Dashboard counters for the user."""

    _require_profile(user_id)
    habits, logs_by_habit = get_context().habit_service.habits_with_logs(user_id)
    return jsonify(stats_overview(habits, logs_by_habit, date.today()))


@bp.get("/chart")
def habit_chart(user_id: int):
    """Seven-day scheduled vs completed series across the user's habits."""

    _require_profile(user_id)
    habits, logs_by_habit = get_context().habit_service.habits_with_logs(user_id)
    return jsonify({"days": weekly_chart(habits, logs_by_habit, date.today())})


@bp.get("/activity")
def habit_activity(user_id: int):
    """Recent logs, new habits and streak milestones, newest first."""

    ctx = get_context()
    profile = ctx.profile_repo.get_by_id(user_id)
    if profile is None:
        raise ProfileNotFoundError(user_id)
    habits, logs_by_habit = ctx.habit_service.habits_with_logs(user_id)
    return jsonify({"items": recent_activity(profile, habits, logs_by_habit)})
