"""
Exception types surfaced by the scheduling and streak engine and its callers.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable


class StreakmasterError(Exception):
    """Base exception for the application"""


class NotScheduledError(StreakmasterError):
    """Raised when a log is attempted for a date the habit is not due on"""

    def __init__(self, habit_id: int | None, day: date):
        self.habit_id = habit_id
        self.day = day
        super().__init__(f"Habit {habit_id} is not scheduled on {day.isoformat()}")


class AlreadyLoggedError(StreakmasterError):
    """Raised when a log already exists for the habit and date"""

    def __init__(self, habit_id: int | None, day: date):
        self.habit_id = habit_id
        self.day = day
        super().__init__(f"Habit {habit_id} is already logged for {day.isoformat()}")


class InvalidWeekdaySetError(StreakmasterError):
    """Raised when a custom-weekdays habit has an empty or out-of-range weekday set"""

    def __init__(self, weekdays: Iterable[int] | None):
        self.weekdays = list(weekdays) if weekdays is not None else None
        super().__init__(
            f"Custom weekday habits need a non-empty set of weekdays 0-6 (0 = Sunday), "
            f"got {self.weekdays!r}"
        )


class HabitNotFoundError(StreakmasterError):
    """Raised when a habit does not exist or is not owned by the caller"""

    def __init__(self, habit_id: int):
        self.habit_id = habit_id
        super().__init__(f"Habit with ID {habit_id} not found")


class ProfileNotFoundError(StreakmasterError):
    """Raised when a profile does not exist"""

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(f"Profile with ID {user_id} not found")


class CategoryNotFoundError(StreakmasterError):
    """Raised when a category does not exist or is not owned by the caller"""

    def __init__(self, category_id: int):
        self.category_id = category_id
        super().__init__(f"Category with ID {category_id} not found")


__all__ = [
    "AlreadyLoggedError",
    "CategoryNotFoundError",
    "HabitNotFoundError",
    "InvalidWeekdaySetError",
    "NotScheduledError",
    "ProfileNotFoundError",
    "StreakmasterError",
]
