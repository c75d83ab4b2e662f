"""Service module exports."""

from . import habits, leaderboard, overview, recompute, scheduling, streaks

__all__ = [
    "habits",
    "leaderboard",
    "overview",
    "recompute",
    "scheduling",
    "streaks",
]
