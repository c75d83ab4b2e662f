"""Read-side helpers for habit lists, charts, the activity feed and dashboard stats.

Every function here is pure: it takes habits and logs already fetched by the
caller and a ``today`` date, and builds plain dicts/values for the API layer.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable, Mapping, Sequence

from ..models.habit import Frequency, Habit, HabitLog, LogStatus, weekday_of
from ..models.profile import Profile
from .scheduling import WEEKDAY_NAMES, as_day, is_scheduled, scheduled_dates

PENDING = "pending"
NOT_SCHEDULED = "not-scheduled"
SORT_ORDERS = ("schedule", "completion", "created")
STREAK_MILESTONES = frozenset({7, 14, 21, 30, 60, 90, 100, 180, 365})

_STATUS_VERBS = {
    LogStatus.DONE: "completed",
    LogStatus.SKIPPED: "skipped",
    LogStatus.MISSED: "missed",
}


def _percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return math.floor(part * 100 / whole + 0.5)


def _status_by_day(logs: Iterable[HabitLog]) -> dict[date, LogStatus]:
    return {as_day(log.log_date): LogStatus(log.status) for log in logs}


def today_status(logs: Iterable[HabitLog], today: date) -> str:
    """Return today's logged status value, or ``pending`` when nothing is logged."""
    status = _status_by_day(logs).get(as_day(today))
    return status.value if status is not None else PENDING


def is_overdue(habit: Habit, logs: Iterable[HabitLog], today: date) -> bool:
    """A habit is overdue when it is due today and today is still unlogged."""
    return is_scheduled(habit, today) and today_status(logs, today) == PENDING


def completion_percentage(habit: Habit, logs: Iterable[HabitLog], today: date) -> int:
    """Percentage of scheduled days from the start date through today marked Done."""
    scheduled = set(scheduled_dates(habit, habit.start_date, today))
    if not scheduled:
        return 0
    done = sum(
        1
        for day, status in _status_by_day(logs).items()
        if status is LogStatus.DONE and day in scheduled
    )
    return _percent(done, len(scheduled))


def recent_history(
    habit: Habit, logs: Iterable[HabitLog], today: date, *, days: int = 7
) -> list[dict[str, Any]]:
    """Per-day status for the ``days`` days ending today, oldest first."""
    by_day = _status_by_day(logs)
    end = as_day(today)
    history: list[dict[str, Any]] = []
    for offset in range(days - 1, -1, -1):
        day = end - timedelta(days=offset)
        scheduled = is_scheduled(habit, day)
        logged = by_day.get(day)
        if logged is not None:
            status = logged.value
        else:
            status = PENDING if scheduled else NOT_SCHEDULED
        history.append(
            {
                "date": day.isoformat(),
                "weekday": WEEKDAY_NAMES[weekday_of(day)],
                "day": day.day,
                "scheduled": scheduled,
                "status": status,
            }
        )
    return history


def habit_summary(habit: Habit, logs: Sequence[HabitLog], today: date) -> dict[str, Any]:
    """Serialize a habit with its derived list-view fields."""
    return {
        "id": habit.id,
        "name": habit.name,
        "category_id": habit.category_id,
        "frequency": Frequency(habit.frequency).value,
        "weekdays": habit.weekdays,
        "start_date": habit.start_date.isoformat(),
        "end_date": habit.end_date.isoformat() if habit.end_date else None,
        "current_streak": habit.current_streak,
        "completion": completion_percentage(habit, logs, today),
        "today_status": today_status(logs, today),
        "scheduled_today": is_scheduled(habit, today),
        "overdue": is_overdue(habit, logs, today),
        "history": recent_history(habit, logs, today),
    }


def sort_habits(
    habits: Sequence[Habit],
    logs_by_habit: Mapping[int, Sequence[HabitLog]],
    today: date,
    order: str = "schedule",
) -> list[Habit]:
    """Order habits for display.

    ``schedule``: overdue first, then due today, otherwise input order.
    ``completion``: lowest completion percentage first.
    ``created``: newest first.
    """
    if order not in SORT_ORDERS:
        raise ValueError(f"Unknown sort order {order!r}; expected one of {', '.join(SORT_ORDERS)}")

    def logs_for(habit: Habit) -> Sequence[HabitLog]:
        return logs_by_habit.get(habit.id, ()) if habit.id is not None else ()

    if order == "schedule":
        return sorted(
            habits,
            key=lambda h: (
                not is_overdue(h, logs_for(h), today),
                not is_scheduled(h, today),
            ),
        )
    if order == "completion":
        return sorted(habits, key=lambda h: completion_percentage(h, logs_for(h), today))
    return sorted(habits, key=lambda h: h.created_at, reverse=True)


def stats_overview(
    habits: Sequence[Habit],
    logs_by_habit: Mapping[int, Sequence[HabitLog]],
    today: date,
) -> dict[str, int]:
    """Dashboard counters for one user."""
    today = as_day(today)
    started = [habit for habit in habits if as_day(habit.start_date) <= today]
    completed_today = sum(
        1
        for habit in started
        if today_status(logs_by_habit.get(habit.id, ()), today) == LogStatus.DONE.value
    )
    return {
        "total_habits": len(habits),
        "active_habits": sum(
            1 for habit in habits if habit.end_date is None or as_day(habit.end_date) >= today
        ),
        "total_streak": sum(habit.current_streak or 0 for habit in habits),
        "today_completed": completed_today,
        "today_total": len(started),
        "today_percentage": _percent(completed_today, len(started)),
    }


def weekly_chart(
    habits: Sequence[Habit],
    logs_by_habit: Mapping[int, Sequence[HabitLog]],
    today: date,
    *,
    days: int = 7,
) -> list[dict[str, Any]]:
    """Scheduled vs completed totals across all habits, one entry per day, oldest first.

    A habit counts towards a day only when it is due that day; a Done log on
    an unscheduled day is ignored.
    """
    done_days = {
        habit.id: {
            day
            for day, status in _status_by_day(logs_by_habit.get(habit.id, ())).items()
            if status is LogStatus.DONE
        }
        for habit in habits
    }
    end = as_day(today)
    chart: list[dict[str, Any]] = []
    for offset in range(days - 1, -1, -1):
        day = end - timedelta(days=offset)
        due = [habit for habit in habits if is_scheduled(habit, day)]
        completed = sum(1 for habit in due if day in done_days[habit.id])
        chart.append(
            {
                "date": day.isoformat(),
                "day": WEEKDAY_NAMES[weekday_of(day)],
                "scheduled": len(due),
                "completed": completed,
                "percentage": _percent(completed, len(due)),
            }
        )
    return chart


def _utc(moment: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; they were written as UTC.
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=timezone.utc)


def recent_activity(
    profile: Profile,
    habits: Sequence[Habit],
    logs_by_habit: Mapping[int, Sequence[HabitLog]],
    *,
    limit: int = 10,
    log_limit: int = 20,
    habit_limit: int = 5,
) -> list[dict[str, Any]]:
    """Merged activity feed for one user, newest first.

    Draws from the ``log_limit`` most recently written logs, the
    ``habit_limit`` newest habits and the profile's streak (a milestone entry
    when the total is one of ``STREAK_MILESTONES``, and a current-streak entry
    when it is positive). At most ``limit`` items are returned.
    """
    names = {habit.id: habit.name for habit in habits}
    items: list[tuple[datetime, dict[str, Any]]] = []

    logs = [log for habit_id in names for log in logs_by_habit.get(habit_id, ())]
    logs.sort(key=lambda log: _utc(log.created_at), reverse=True)
    for log in logs[:log_limit]:
        name = names[log.habit_id]
        verb = _STATUS_VERBS[LogStatus(log.status)]
        day = as_day(log.log_date)
        items.append(
            (
                _utc(log.created_at),
                {
                    "type": "completion",
                    "title": name,
                    "description": f'{verb.capitalize()} "{name}" on {day:%b} {day.day}',
                    "habit_id": log.habit_id,
                    "status": LogStatus(log.status).value,
                },
            )
        )

    total = profile.total_streak or 0
    if total > 0 and profile.updated_at is not None:
        updated = _utc(profile.updated_at)
        if total in STREAK_MILESTONES:
            items.append(
                (
                    updated,
                    {
                        "type": "milestone",
                        "title": f"{total} Day Streak!",
                        "description": f"Reached {total} consecutive days!",
                        "streak": total,
                    },
                )
            )
        items.append(
            (
                updated,
                {
                    "type": "streak",
                    "title": f"Current Streak: {total} days",
                    "description": "Keep up the great work!",
                    "streak": total,
                },
            )
        )

    newest = sorted(habits, key=lambda habit: _utc(habit.created_at), reverse=True)
    for habit in newest[:habit_limit]:
        items.append(
            (
                _utc(habit.created_at),
                {
                    "type": "created",
                    "title": f"New Habit: {habit.name}",
                    "description": "Started tracking this habit",
                    "habit_id": habit.id,
                },
            )
        )

    items.sort(key=lambda item: item[0], reverse=True)
    return [{**entry, "timestamp": moment.isoformat()} for moment, entry in items[:limit]]


__all__ = [
    "NOT_SCHEDULED",
    "PENDING",
    "SORT_ORDERS",
    "STREAK_MILESTONES",
    "completion_percentage",
    "habit_summary",
    "is_overdue",
    "recent_activity",
    "recent_history",
    "sort_habits",
    "stats_overview",
    "today_status",
    "weekly_chart",
]
