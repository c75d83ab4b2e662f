"""Streak calculation for habits and the per-user rollup.

Two strategies coexist and are kept as separate operations:

* ``incremental_streak`` updates a cached streak from a single new log for
  today. Used by ``HabitService.log_today`` (the interactive path).
* ``recompute_streak`` derives the streak from the full log history. Used by
  the nightly batch job and the admin/CLI trigger; it is the ground truth.

On a dense history (one log per scheduled day) both agree. A scheduled day
with no log row at all is invisible to both: it neither counts nor resets.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Sequence

from ..exceptions import AlreadyLoggedError, NotScheduledError
from ..models.habit import Habit, HabitLog, LogStatus
from .scheduling import as_day, is_scheduled


def incremental_streak(previous: int, status: LogStatus | str) -> int:
    """Return the streak after recording ``status`` on top of ``previous``.

    Done increments, Missed resets to zero, Skipped holds. Never decrements.
    """
    status = LogStatus(status)
    if status is LogStatus.DONE:
        return max(previous, 0) + 1
    if status is LogStatus.MISSED:
        return 0
    return max(previous, 0)


def streak_sequence(statuses: Iterable[LogStatus | str], *, previous: int = 0) -> list[int]:
    """Replay ``statuses`` through ``incremental_streak`` and return every intermediate value."""

    values: list[int] = []
    current = previous
    for status in statuses:
        current = incremental_streak(current, status)
        values.append(current)
    return values


def recompute_streak(habit: Habit, logs: Iterable[HabitLog]) -> int:
    """Derive the current streak of ``habit`` purely from its log history.

    Walks logs newest first, ignoring days the habit is not scheduled on.
    Done counts, Skipped is stepped over, the first Missed stops the walk.
    Idempotent: the same log set always yields the same value.
    """
    ordered = sorted(logs, key=lambda log: as_day(log.log_date), reverse=True)

    streak = 0
    for log in ordered:
        if not is_scheduled(habit, log.log_date):
            continue
        status = LogStatus(log.status)
        if status is LogStatus.MISSED:
            break
        if status is LogStatus.DONE:
            streak += 1
    return streak


def ensure_can_log(habit: Habit, logs: Sequence[HabitLog], day: date | datetime) -> None:
    """Check the guards a caller must pass before inserting a log for ``day``.

    Raises:
        NotScheduledError: the habit is not due on ``day``
        AlreadyLoggedError: a log for ``(habit, day)`` already exists
    """
    target = as_day(day)
    if not is_scheduled(habit, target):
        raise NotScheduledError(habit.id, target)
    if any(as_day(log.log_date) == target for log in logs):
        raise AlreadyLoggedError(habit.id, target)


def total_streak(user_id: int, habits: Iterable[Habit]) -> int:
    """Sum ``current_streak`` over the habits owned by ``user_id``.

    Always a full re-sum; callers persist the result after every streak change.
    """
    return sum(habit.current_streak or 0 for habit in habits if habit.user_id == user_id)


__all__ = [
    "ensure_can_log",
    "incremental_streak",
    "recompute_streak",
    "streak_sequence",
    "total_streak",
]
