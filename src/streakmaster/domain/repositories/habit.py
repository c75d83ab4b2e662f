"""Habit repository protocol."""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from ...models.habit import Habit, HabitLog


class HabitRepository(Protocol):
    """Repository for habits and their logs, scoped by owner."""

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def get_with_logs(
        self, habit_id: int, *, user_id: int
    ) -> Optional[tuple[Habit, list[HabitLog]]]:
        """Retrieve a habit together with its full log history."""
        ...

    def list_for_user(self, user_id: int) -> list[Habit]:
        """List every habit owned by a user."""
        ...

    def list_all(self) -> list[Habit]:
        """List every habit of every user (batch jobs only)."""
        ...

    def create(self, habit: Habit, *, user_id: int) -> Habit:
        """Create a new habit."""
        ...

    def update(self, habit: Habit, *, user_id: int) -> Habit:
        """Update an existing habit."""
        ...

    def delete(self, habit_id: int, *, user_id: int) -> bool:
        """Delete a habit and its logs; return False when nothing was deleted."""
        ...

    def list_logs(self, habit_id: int, *, user_id: int) -> list[HabitLog]:
        """Get every log of a habit, oldest first."""
        ...

    def logs_by_habit(self, habit_ids: Iterable[int], *, user_id: int) -> dict[int, list[HabitLog]]:
        """Get logs for several habits keyed by habit ID."""
        ...

    def insert_log(self, log: HabitLog, *, user_id: int) -> HabitLog:
        """Insert a log if none exists for its (habit, day); raise AlreadyLoggedError otherwise."""
        ...

    def update_streak(self, habit_id: int, streak: int, *, user_id: int) -> Habit:
        """Persist a habit's current streak."""
        ...

    def save_streak_and_total(self, habit_id: int, streak: int, *, user_id: int) -> int:
        """Persist a habit's streak and its owner's re-summed total in one transaction."""
        ...
