"""Batch streak recomputation run by the nightly job, the CLI and the admin API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..domain.repositories import HabitRepository, ProfileRepository
from ..logging_config import get_logger
from .streaks import recompute_streak, total_streak

logger = get_logger("services.recompute")


@dataclass
class RecomputeSummary:
    """Outcome of one batch run; a partial success still reports what was updated."""

    updated: int = 0
    changed: int = 0
    failed: int = 0
    profiles: int = 0
    failed_habit_ids: list[int] = field(default_factory=list)
    failed_profile_ids: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "updated": self.updated,
            "changed": self.changed,
            "failed": self.failed,
            "profiles": self.profiles,
            "failed_habit_ids": list(self.failed_habit_ids),
            "failed_profile_ids": list(self.failed_profile_ids),
        }


def recompute_all_streaks(
    habit_repo: HabitRepository, profile_repo: ProfileRepository
) -> RecomputeSummary:
    """Recompute every habit's streak from its logs, then re-sum every owner's total.

    A failure on one habit or profile is logged and skipped; the run continues.
    Running it twice over the same logs writes the same values.
    """
    summary = RecomputeSummary()
    owners: set[int] = set()

    habits = habit_repo.list_all()
    logger.info("Streak recomputation started", extra={"habits": len(habits)})

    for habit in habits:
        if habit.id is None:
            continue
        owners.add(habit.user_id)
        try:
            logs = habit_repo.list_logs(habit.id, user_id=habit.user_id)
            streak = recompute_streak(habit, logs)
            if streak != habit.current_streak:
                summary.changed += 1
            habit_repo.update_streak(habit.id, streak, user_id=habit.user_id)
        except Exception:
            summary.failed += 1
            summary.failed_habit_ids.append(habit.id)
            logger.exception(
                "Streak recomputation failed for habit",
                extra={"habit_id": habit.id, "user_id": habit.user_id},
            )
            continue
        summary.updated += 1

    for user_id in sorted(owners):
        try:
            total = total_streak(user_id, habit_repo.list_for_user(user_id))
            profile_repo.update_total_streak(user_id, total)
        except Exception:
            summary.failed_profile_ids.append(user_id)
            logger.exception("Total streak refresh failed", extra={"user_id": user_id})
            continue
        summary.profiles += 1

    logger.info("Streak recomputation finished", extra=summary.to_dict())
    return summary


__all__ = ["RecomputeSummary", "recompute_all_streaks"]
