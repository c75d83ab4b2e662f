"""Habit service: the caller-side orchestration around the streak engine.

Creating and editing habits validates the schedule. Logging enforces the
guards, inserts the log, applies the incremental streak update and refreshes
the owner's total. Deleting a habit re-sums the owner's total.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Optional

from ..domain.repositories import CategoryRepository, HabitRepository, ProfileRepository
from ..exceptions import (
    AlreadyLoggedError,
    HabitNotFoundError,
    NotScheduledError,
    ProfileNotFoundError,
)
from ..logging_config import get_logger
from ..models.habit import Frequency, Habit, HabitLog, LogStatus
from .scheduling import as_day, validate_weekdays
from .streaks import ensure_can_log, incremental_streak, total_streak

logger = get_logger("services.habits")

_EDITABLE_FIELDS = frozenset(
    {"name", "frequency", "weekdays", "start_date", "end_date", "category_id"}
)


@dataclass(frozen=True)
class LogOutcome:
    """Result of recording today's log for a habit."""

    habit_id: int
    log_date: date
    status: LogStatus
    current_streak: int
    total_streak: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "habit_id": self.habit_id,
            "log_date": self.log_date.isoformat(),
            "status": self.status.value,
            "current_streak": self.current_streak,
            "total_streak": self.total_streak,
        }


def _clean_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValueError("Please provide a habit name.")
    if len(cleaned) > 80:
        raise ValueError("Habit names are limited to 80 characters.")
    return cleaned


def _check_date_range(start_date: date, end_date: Optional[date]) -> None:
    if end_date is not None and end_date < start_date:
        raise ValueError("End date cannot be before the start date.")


class HabitService:
    """Create, edit, delete and log habits while keeping streaks in sync."""

    def __init__(
        self,
        habit_repo: HabitRepository,
        profile_repo: ProfileRepository,
        category_repo: CategoryRepository | None = None,
    ):
        self.habit_repo = habit_repo
        self.profile_repo = profile_repo
        self.category_repo = category_repo

    def _check_category(self, category_id: Optional[int], user_id: int) -> None:
        if category_id is None or self.category_repo is None:
            return
        if self.category_repo.get_by_id(category_id, user_id=user_id) is None:
            raise ValueError(f"Category with ID {category_id} not found")

    def create_habit(
        self,
        user_id: int,
        *,
        name: str,
        frequency: Frequency | str,
        start_date: date,
        weekdays: Iterable[int] | None = None,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
    ) -> Habit:
        """Validate and persist a new habit with a zero streak.

        Raises:
            InvalidWeekdaySetError: custom weekday habit without a valid set
            ValueError: blank name, unknown frequency or end before start
            ProfileNotFoundError: unknown owner
        """
        if self.profile_repo.get_by_id(user_id) is None:
            raise ProfileNotFoundError(user_id)

        frequency = Frequency(frequency)
        start = as_day(start_date)
        end = as_day(end_date) if end_date is not None else None
        _check_date_range(start, end)
        self._check_category(category_id, user_id)

        habit = Habit(
            user_id=user_id,
            name=_clean_name(name),
            frequency=frequency,
            weekdays=validate_weekdays(frequency, weekdays),
            start_date=start,
            end_date=end,
            category_id=category_id,
            current_streak=0,
        )
        created = self.habit_repo.create(habit, user_id=user_id)
        logger.info(
            "Habit created",
            extra={"habit_id": created.id, "user_id": user_id, "frequency": frequency.value},
        )
        return created

    def edit_habit(self, user_id: int, habit_id: int, **changes: Any) -> Habit:
        """Apply schedule/name edits to a habit.

        ``current_streak`` is not editable here; only the streak engine writes it.
        Schedule edits take effect on streaks at the next batch recomputation.
        """
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot edit field(s): {', '.join(sorted(unknown))}")

        habit = self.habit_repo.get_by_id(habit_id, user_id=user_id)
        if habit is None:
            raise HabitNotFoundError(habit_id)

        if "name" in changes:
            habit.name = _clean_name(changes["name"])
        if "frequency" in changes:
            habit.frequency = Frequency(changes["frequency"])
        if "start_date" in changes:
            habit.start_date = as_day(changes["start_date"])
        if "end_date" in changes:
            end = changes["end_date"]
            habit.end_date = as_day(end) if end is not None else None
        if "category_id" in changes:
            self._check_category(changes["category_id"], user_id)
            habit.category_id = changes["category_id"]

        weekdays = changes.get("weekdays", habit.weekdays)
        habit.weekdays = validate_weekdays(habit.frequency, weekdays)
        _check_date_range(habit.start_date, habit.end_date)

        updated = self.habit_repo.update(habit, user_id=user_id)
        logger.info(
            "Habit edited",
            extra={"habit_id": habit_id, "user_id": user_id, "fields": sorted(changes)},
        )
        return updated

    def delete_habit(self, user_id: int, habit_id: int) -> int:
        """Delete a habit with its logs and return the owner's refreshed total streak."""
        if not self.habit_repo.delete(habit_id, user_id=user_id):
            raise HabitNotFoundError(habit_id)
        logger.info("Habit deleted", extra={"habit_id": habit_id, "user_id": user_id})
        return self.refresh_total_streak(user_id)

    def log_today(
        self,
        user_id: int,
        habit_id: int,
        status: LogStatus | str,
        *,
        today: date | None = None,
    ) -> LogOutcome:
        """Record today's status for a habit and update streaks incrementally.

        Raises:
            HabitNotFoundError: unknown habit or not owned by ``user_id``
            NotScheduledError: the habit is not due today
            AlreadyLoggedError: today's log already exists (including a lost race)
        """
        status = LogStatus(status)
        day = as_day(today or date.today())

        found = self.habit_repo.get_with_logs(habit_id, user_id=user_id)
        if found is None:
            raise HabitNotFoundError(habit_id)
        habit, logs = found

        try:
            ensure_can_log(habit, logs, day)
            self.habit_repo.insert_log(
                HabitLog(habit_id=habit_id, log_date=day, status=status), user_id=user_id
            )
        except (NotScheduledError, AlreadyLoggedError) as exc:
            logger.warning(
                "Habit log rejected: %s",
                exc,
                extra={"habit_id": habit_id, "user_id": user_id, "reason": type(exc).__name__},
            )
            raise

        new_streak = incremental_streak(habit.current_streak, status)
        new_total = self.habit_repo.save_streak_and_total(habit_id, new_streak, user_id=user_id)
        logger.info(
            "Habit logged",
            extra={
                "habit_id": habit_id,
                "user_id": user_id,
                "log_date": day.isoformat(),
                "status": status.value,
                "current_streak": new_streak,
                "total_streak": new_total,
            },
        )
        return LogOutcome(
            habit_id=habit_id,
            log_date=day,
            status=status,
            current_streak=new_streak,
            total_streak=new_total,
        )

    def refresh_total_streak(self, user_id: int) -> int:
        """Re-sum every owned habit's streak and persist it on the profile."""
        total = total_streak(user_id, self.habit_repo.list_for_user(user_id))
        self.profile_repo.update_total_streak(user_id, total)
        return total

    def habits_with_logs(self, user_id: int) -> tuple[list[Habit], dict[int, list[HabitLog]]]:
        """Return a user's habits and their logs keyed by habit ID."""
        habits = self.habit_repo.list_for_user(user_id)
        logs = self.habit_repo.logs_by_habit(
            [habit.id for habit in habits if habit.id is not None], user_id=user_id
        )
        return habits, logs


__all__ = ["HabitService", "LogOutcome"]
